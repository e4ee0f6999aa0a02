"""Built-in chart definitions and the default, frozen registry."""

from __future__ import annotations

from chartmodel.charts.bar import BarChart
from chartmodel.charts.base import ChartDefinition, InteractionState, Layout, ThemeTokens
from chartmodel.charts.donut import DonutChart
from chartmodel.charts.histogram import HistogramChart
from chartmodel.charts.pareto import ParetoChart, SplitParetoChart
from chartmodel.charts.range import BulletDeltaChart, DumbbellChart
from chartmodel.charts.segments import BitfieldChart, SegmentedBarChart
from chartmodel.charts.series import SparkAreaChart, SparklineBarsChart, SparklineChart
from chartmodel.registry import ChartRegistry

BUILTIN_CHARTS: tuple[type[ChartDefinition], ...] = (
    BarChart,
    BitfieldChart,
    BulletDeltaChart,
    DonutChart,
    DumbbellChart,
    HistogramChart,
    ParetoChart,
    SegmentedBarChart,
    SparkAreaChart,
    SparklineBarsChart,
    SparklineChart,
    SplitParetoChart,
)


def build_default_registry(*, freeze: bool = True) -> ChartRegistry:
    registry = ChartRegistry(chart() for chart in BUILTIN_CHARTS)
    if freeze:
        registry.freeze()
    return registry


DEFAULT_REGISTRY = build_default_registry()


__all__ = [
    "BUILTIN_CHARTS",
    "DEFAULT_REGISTRY",
    "ChartDefinition",
    "InteractionState",
    "Layout",
    "ThemeTokens",
    "build_default_registry",
]
