import pytest

from chartmodel.charts import BUILTIN_CHARTS, DEFAULT_REGISTRY, build_default_registry
from chartmodel.charts.bar import BarChart
from chartmodel.charts.base import ChartDefinition
from chartmodel.errors import RegistryError
from chartmodel.registry import ChartRegistry


BUILTIN_TYPES = {
    "bar",
    "bitfield",
    "bullet-delta",
    "donut",
    "dumbbell",
    "histogram",
    "pareto",
    "segmented-bar",
    "spark-area",
    "sparkline",
    "sparkline-bars",
    "split-pareto",
}


def test_default_registry_holds_every_builtin_chart() -> None:
    assert set(DEFAULT_REGISTRY.list()) == BUILTIN_TYPES
    assert len(DEFAULT_REGISTRY) == len(BUILTIN_CHARTS)
    assert DEFAULT_REGISTRY.frozen
    assert DEFAULT_REGISTRY.verify() == []


def test_frozen_registry_rejects_registration() -> None:
    with pytest.raises(RegistryError, match="frozen"):
        DEFAULT_REGISTRY.register(BarChart(), overwrite=True)


def test_register_and_get() -> None:
    registry = ChartRegistry()
    chart = BarChart()

    registry.register(chart)

    assert registry.get("bar") is chart
    assert registry.find("bar") is chart
    assert "bar" in registry
    assert 3 not in registry
    assert registry.find(3) is None


def test_duplicate_requires_overwrite() -> None:
    registry = ChartRegistry([BarChart()])
    replacement = BarChart()

    with pytest.raises(RegistryError, match="already registered"):
        registry.register(BarChart())

    registry.register(replacement, overwrite=True)
    assert registry.get("bar") is replacement


def test_get_unknown_lists_available_types() -> None:
    registry = build_default_registry(freeze=False)

    with pytest.raises(KeyError, match="Available: bar, bitfield"):
        registry.get("pie")
    with pytest.raises(TypeError, match="non-empty string"):
        registry.get("  ")


def test_verify_reports_incomplete_definitions() -> None:
    class Partial(ChartDefinition):
        type = "partial"

        def normalize(self, spec, data):
            return None

    registry = ChartRegistry([Partial()])

    assert registry.verify() == [
        "partial: missing marks implementation.",
        "partial: missing a11y implementation.",
    ]


def test_chart_meta_serializes_with_camel_case_keys() -> None:
    meta = DEFAULT_REGISTRY.get_chart_meta("donut")

    assert meta.to_dict() == {
        "type": "donut",
        "displayName": "Donut",
        "category": "lines",
        "defaultPad": 2,
        "preferredAspectRatio": "square",
    }
    segmented = DEFAULT_REGISTRY.get_chart_meta("segmented-bar").to_dict()
    assert "preferredAspectRatio" not in segmented


def test_all_chart_meta_is_sorted_by_type() -> None:
    types = [meta.type for meta in DEFAULT_REGISTRY.all_chart_meta()]

    assert types == sorted(BUILTIN_TYPES)
