"""Unit tests for display/composition coordinate conversion."""

import pytest

from overlaystudio.editor.coordinates import (
    IDENTITY_SCALE,
    CoordinateTransform,
    compute_scale,
    size_to_composition,
    size_to_display,
    to_composition,
    to_display,
)
from overlaystudio.models.geometry import (
    CompositionValidationError,
    FrameSize,
    Point,
    ScaleFactor,
    Size,
)

COMPOSITION = FrameSize(width=1280, height=720)


class TestComputeScale:
    def test_uniform(self) -> None:
        assert compute_scale(Size(width=640, height=360), COMPOSITION) == ScaleFactor(x=0.5, y=0.5)

    def test_axes_are_independent(self) -> None:
        scale = compute_scale(Size(width=640, height=720), COMPOSITION)
        assert scale.x == pytest.approx(0.5)
        assert scale.y == pytest.approx(1.0)

    @pytest.mark.parametrize("width,height", [(0, 360), (640, 0), (0, 0)])
    def test_zero_container_raises(self, width: float, height: float) -> None:
        with pytest.raises(CompositionValidationError):
            compute_scale(Size(width=width, height=height), COMPOSITION)


class TestConversion:
    def test_to_display_and_back(self) -> None:
        scale = ScaleFactor(x=0.5, y=0.25)
        assert to_display(Point(x=100, y=200), scale) == Point(x=50, y=50)
        assert to_composition(Point(x=50, y=50), scale) == Point(x=100, y=200)

    @pytest.mark.parametrize(
        "scale",
        [ScaleFactor(x=0.5, y=0.5), ScaleFactor(x=0.3, y=1.7), ScaleFactor(x=1 / 3, y=2 / 7)],
    )
    def test_round_trip(self, scale: ScaleFactor) -> None:
        for point in (Point(x=0, y=0), Point(x=123.4, y=567.8), Point(x=1280, y=720)):
            back = to_composition(to_display(point, scale), scale)
            assert back.x == pytest.approx(point.x)
            assert back.y == pytest.approx(point.y)

    def test_sizes(self) -> None:
        scale = ScaleFactor(x=0.5, y=0.25)
        assert size_to_display(COMPOSITION, scale) == Size(width=640, height=180)
        assert size_to_composition(Size(width=640, height=180), scale) == Size(width=1280, height=720)


class TestCoordinateTransform:
    def test_default_is_identity(self) -> None:
        transform = CoordinateTransform()
        assert transform.scale == IDENTITY_SCALE
        assert transform.to_composition(Point(x=7, y=9)) == Point(x=7, y=9)

    def test_for_viewport(self) -> None:
        transform = CoordinateTransform.for_viewport(Size(width=640, height=360), COMPOSITION)
        assert transform.to_composition(Point(x=320, y=180)) == Point(x=640, y=360)
        assert transform.to_display(Point(x=640, y=360)) == Point(x=320, y=180)
        assert transform.size_to_display(COMPOSITION) == Size(width=640, height=360)
