"""Tests for markup elements and exclusion rules."""

from __future__ import annotations

import dataclasses

import pytest

from svg2ivg.markup import (
    DEFAULT_EXCLUSIONS,
    Circle,
    Ellipse,
    ExactMatch,
    FillIsNone,
    Path,
    Polygon,
    Rect,
    is_excluded,
    to_path,
)
from svg2ivg.markup.elements import clean_path_data
from svg2ivg.markup.exclusion import FULL_CANVAS_BACKGROUND, ElementPredicate
from svg2ivg.pathdata import parse_path_data
from svg2ivg.utils.float32 import f32, to_text


# ---------------------------------------------------------------------------
# Equality
# ---------------------------------------------------------------------------


class TestEquality:
    def test_opacity_ignored(self) -> None:
        assert Path(d="M0 0", opacity=0.5) == Path(d="M0 0")
        assert Rect(0, 0, 1, 1, fill_opacity=0.2) == Rect(0, 0, 1, 1)

    def test_fill_compared(self) -> None:
        assert Path(d="M0 0", fill="none") != Path(d="M0 0")

    def test_different_variants_unequal(self) -> None:
        assert Circle(1, 1, 1) != Ellipse(1, 1, 1, 1)

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Path(d="M0 0").d = "M1 1"  # type: ignore[misc]

    def test_clean_path_data(self) -> None:
        assert clean_path_data(" M1,2  L3,4\n") == "M1 2 L3 4"


# ---------------------------------------------------------------------------
# Shape -> path rewriting
# ---------------------------------------------------------------------------


class TestToPath:
    def test_path_passthrough(self) -> None:
        p = Path(d="M0 0 L1 1", fill="#000", opacity=0.5)
        assert to_path(p) is p

    def test_rect(self) -> None:
        assert to_path(Rect(0, 0, 24, 24)).d == "M0 0 h24 v24 h-24 Z"

    def test_rect_fractional(self) -> None:
        assert to_path(Rect(1.5, 2, 3.25, 4)).d == "M1.5 2 h3.25 v4 h-3.25 Z"

    def test_circle_is_two_arcs(self) -> None:
        d = to_path(Circle(12, 12, 10)).d
        assert d == "M2 12 a10 10 0 1 0 20 0 a10 10 0 1 0 -20 0 Z"

    def test_ellipse(self) -> None:
        d = to_path(Ellipse(10, 5, 4, 2)).d
        assert d == "M6 5 a4 2 0 1 0 8 0 a4 2 0 1 0 -8 0 Z"

    def test_polygon_closed(self) -> None:
        d = to_path(Polygon(points=((0, 0), (4, 0), (4, 4)))).d
        assert d == "M0 0 L4 0 L4 4 Z"

    def test_polyline_open(self) -> None:
        d = to_path(Polygon(points=((0, 0), (4, 0)), closed=False)).d
        assert d == "M0 0 L4 0"

    def test_empty_polygon(self) -> None:
        assert to_path(Polygon(points=())).d == ""

    def test_paint_carried_over(self) -> None:
        p = to_path(Rect(0, 0, 1, 1, fill="#f00", fill_opacity=0.5, opacity=0.25))
        assert (p.fill, p.fill_opacity, p.opacity) == ("#f00", 0.5, 0.25)

    def test_rewritten_data_parses(self) -> None:
        for shape in (Rect(0, 0, 2, 3), Circle(5, 5, 1), Polygon(((1, 1), (2, 2)))):
            assert parse_path_data(to_path(shape).d)

    def test_unknown_variant(self) -> None:
        with pytest.raises(TypeError):
            to_path("M0 0")  # type: ignore[arg-type]

    def test_to_text_shortest_float32(self) -> None:
        assert to_text(f32(0.1)) == "0.1"
        assert to_text(-0.0) == "0"
        assert to_text(24.0) == "24"


# ---------------------------------------------------------------------------
# Exclusion
# ---------------------------------------------------------------------------


class _CountingPredicate:
    def __init__(self, result: bool) -> None:
        self.result = result
        self.calls = 0

    def matches(self, element) -> bool:
        self.calls += 1
        return self.result


class TestExclusion:
    def test_fill_none(self) -> None:
        assert FillIsNone().matches(Rect(0, 0, 1, 1, fill="none"))
        assert not FillIsNone().matches(Rect(0, 0, 1, 1))
        assert not FillIsNone().matches(Rect(0, 0, 1, 1, fill="#000"))

    def test_exact_match_ignores_opacity(self) -> None:
        rule = ExactMatch(Path(d="M0 0 L1 1"))
        assert rule.matches(Path(d="M0 0 L1 1", opacity=0.3))
        assert not rule.matches(Path(d="M0 0 L1 2"))

    def test_default_rules(self) -> None:
        assert is_excluded(Path(d="M0 0h24v24H0V0z"), DEFAULT_EXCLUSIONS)
        assert is_excluded(Circle(1, 1, 1, fill="none"), DEFAULT_EXCLUSIONS)
        assert not is_excluded(Path(d="M0 0h24v24H0V0z", fill="#000"), DEFAULT_EXCLUSIONS)
        assert not is_excluded(Path(d="M1 1 L2 2"), DEFAULT_EXCLUSIONS)

    def test_background_constant(self) -> None:
        assert ExactMatch(FULL_CANVAS_BACKGROUND) in DEFAULT_EXCLUSIONS

    def test_short_circuit(self) -> None:
        first, second = _CountingPredicate(True), _CountingPredicate(True)
        assert is_excluded(Path(d="M0 0"), [first, second])
        assert (first.calls, second.calls) == (1, 0)

    def test_evaluated_in_order(self) -> None:
        first, second = _CountingPredicate(False), _CountingPredicate(True)
        assert is_excluded(Path(d="M0 0"), [first, second])
        assert (first.calls, second.calls) == (1, 1)

    def test_empty_rules_keep_everything(self) -> None:
        assert not is_excluded(Path(d="M0 0", fill="none"), ())

    def test_protocol_runtime_check(self) -> None:
        assert isinstance(FillIsNone(), ElementPredicate)
        assert isinstance(_CountingPredicate(True), ElementPredicate)
        assert not isinstance(Path(d="M0 0"), ElementPredicate)
