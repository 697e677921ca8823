"""Takeoff forecasts and review insights for a tandem paragliding business."""
