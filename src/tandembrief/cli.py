"""CLI entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from tandembrief.analysis.forecast import build_forecast_days
from tandembrief.config import load_scoring_config, load_site
from tandembrief.fetch.open_meteo import OpenMeteoClient
from tandembrief.insights.aggregation import aggregate_analytics
from tandembrief.insights.llm_config import load_insights_config
from tandembrief.insights.marketing import generate_review, translate_review
from tandembrief.insights.review_analysis import run_review_analysis
from tandembrief.models import AggregatedAnalytics, ForecastDay
from tandembrief.storage.reviews import analysis_cache_path, load_analysis_cache

logger = logging.getLogger(__name__)


def _print_forecast(days: list[ForecastDay]) -> None:
    for day in days:
        s = day.sample
        print(
            f"{day.day_name:<10} {day.date_label:<7} {day.score.percentage:>3}%  "
            f"wind {s.wind_direction_deg:>3.0f}°/{s.wind_speed_kmh:>4.1f} km/h  "
            f"rain {s.precipitation_mm:.1f}mm  cloud {s.cloud_cover_pct:.0f}%  "
            f"base {day.score.breakdown.cloud_base.value}m"
        )
        for violation in day.score.breakdown.safety_violations:
            print(f"    ! {violation.message}")


def _print_stats(stats: AggregatedAnalytics) -> None:
    s = stats.average_sentiment_scores
    print("Average sentiment:")
    print(f"  overall experience      {s.overall_experience}")
    print(f"  safety/professionalism  {s.safety_professionalism}")
    print(f"  value for money         {s.value_for_money}")
    print(f"  staff/service quality   {s.staff_service_quality}")

    if stats.top_positive_phrases:
        print("\nTop highlights:")
        for p in stats.top_positive_phrases:
            print(f"  {p.count:>3}  {p.phrase}")
    if stats.top_concerns:
        print("\nTop concerns:")
        for p in stats.top_concerns:
            print(f"  {p.count:>3}  {p.phrase}")
    if stats.pilot_stats:
        print("\nPilots:")
        ranked = sorted(stats.pilot_stats.items(), key=lambda kv: kv[1].total_mentions, reverse=True)
        for name, pilot in ranked:
            print(f"  {name:<20} {pilot.average_rating:.1f}/5  ({pilot.total_mentions} mentions)")


def run_forecast(days: int) -> None:
    site = load_site()
    config = load_scoring_config()
    forecast = OpenMeteoClient().fetch_site_forecast(site, days=days)

    print(f"Site: {site.name} ({site.elevation_m:.0f} m)")
    print()
    _print_forecast(build_forecast_days(forecast, config, days=days))


def run_analyze(data_dir: Path | None, analyze_all: bool, config_name: str | None) -> None:
    try:
        config = load_insights_config(config_name)
        result = run_review_analysis(data_dir, analyze_all=analyze_all, config=config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    print(
        f"Analyzed {result.newly_analyzed} new reviews "
        f"({result.degraded} degraded, {len(result.cache)}/{result.total_reviews} cached)"
    )
    print()
    _print_stats(result.aggregated)


def main() -> None:
    """CLI entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="tandembrief",
        description="Takeoff forecasts and review insights for tandem paragliding",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    forecast_parser = subparsers.add_parser("forecast", help="Fetch and score the takeoff forecast")
    forecast_parser.add_argument(
        "--days", type=int, default=7, help="Number of forecast days (default: 7)"
    )

    analyze_parser = subparsers.add_parser("analyze", help="Analyze scraped reviews with the LLM")
    analyze_parser.add_argument(
        "--all", action="store_true", dest="analyze_all",
        help="Re-analyze every review, not only uncached ones",
    )
    analyze_parser.add_argument("--data-dir", type=Path, help="Directory holding reviews.json")
    analyze_parser.add_argument(
        "--config", default=None,
        help="Insights config name (default: env TANDEMBRIEF_INSIGHTS_CONFIG or 'default')",
    )

    stats_parser = subparsers.add_parser("stats", help="Show aggregate statistics from the cache")
    stats_parser.add_argument("--data-dir", type=Path, help="Directory holding the analysis cache")

    generate_parser = subparsers.add_parser("generate", help="Draft a short marketing review")
    generate_parser.add_argument(
        "selection", choices=["pilots", "booking", "flight"], help="Aspect to praise"
    )
    generate_parser.add_argument("--config", default=None, help="Insights config name")

    translate_parser = subparsers.add_parser("translate", help="Translate review text to German")
    translate_parser.add_argument("text", help="Text to translate")
    translate_parser.add_argument("--config", default=None, help="Insights config name")

    serve_parser = subparsers.add_parser("serve", help="Run the web API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if args.command == "forecast":
        run_forecast(args.days)
    elif args.command == "analyze":
        run_analyze(args.data_dir, args.analyze_all, args.config)
    elif args.command == "stats":
        cache = load_analysis_cache(analysis_cache_path(args.data_dir))
        print(f"{len(cache)} analyzed reviews")
        print()
        _print_stats(aggregate_analytics(cache))
    elif args.command == "generate":
        print(generate_review(args.selection, load_insights_config(args.config)))
    elif args.command == "translate":
        print(translate_review(args.text, load_insights_config(args.config)))
    elif args.command == "serve":
        import uvicorn

        uvicorn.run("tandembrief.api.app:create_app", factory=True, host=args.host, port=args.port)
