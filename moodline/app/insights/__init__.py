"""Daily aggregation and chart layout for the metrics screen."""

from .chart import ChartMode, RenderPrimitives, Viewport, layout, smooth_path
from .daily import aggregate, average_sleep, iter_days

__all__ = [
    "ChartMode",
    "RenderPrimitives",
    "Viewport",
    "aggregate",
    "average_sleep",
    "iter_days",
    "layout",
    "smooth_path",
]
