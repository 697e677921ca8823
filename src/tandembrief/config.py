"""Launch site and scoring configuration loading from YAML."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from tandembrief.models import LaunchSite, ScoringConfig

CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"


def _config_dir(config_dir: Path | None) -> Path:
    if config_dir is not None:
        return config_dir
    env_dir = os.environ.get("TANDEMBRIEF_CONFIG_DIR")
    return Path(env_dir) if env_dir else CONFIG_DIR


def _load_site_yaml(config_dir: Path | None) -> dict:
    site_file = _config_dir(config_dir) / "site.yaml"
    if not site_file.exists():
        return {}
    with open(site_file) as f:
        return yaml.safe_load(f) or {}


def load_site(config_dir: Path | None = None) -> LaunchSite:
    """Load the launch site from site.yaml, falling back to the built-in defaults.

    Args:
        config_dir: Override for config directory (testing).
    """
    data = _load_site_yaml(config_dir)
    return LaunchSite.model_validate(data.get("site", {}))


def load_scoring_config(config_dir: Path | None = None) -> ScoringConfig:
    """Load scoring parameters from site.yaml.

    Any key left out keeps its default. The ground elevation comes from the
    site section unless the scoring section overrides it.
    """
    data = _load_site_yaml(config_dir)
    site = LaunchSite.model_validate(data.get("site", {}))
    scoring = dict(data.get("scoring") or {})
    scoring.setdefault("ground_elevation_m", site.elevation_m)
    return ScoringConfig.model_validate(scoring)
