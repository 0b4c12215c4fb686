"""
Tests for PanelLayout and request generations.
"""

import pytest

from courseplayer.classroom import PanelLayout, RequestGenerations, clamp_width
from courseplayer.classroom.generation import ENROLLMENT, VIEW
from courseplayer.classroom.layout import MINIMIZED_WIDTH


class TestClampWidth:
    """Width bounds."""

    def test_within_bounds(self):
        assert clamp_width(400, 1440) == 400

    def test_minimum(self):
        assert clamp_width(100, 1440) == 250

    def test_share_of_container(self):
        assert clamp_width(550, 1000) == 400

    def test_absolute_maximum(self):
        assert clamp_width(900, 3000) == 600


class TestPanelLayout:
    """Resizing and minimizing."""

    def test_resize_clamps(self):
        layout = PanelLayout(container_width=1440)
        assert layout.resize("assistant", 1000) == 576
        assert layout.assistant.width == 576

    def test_toggle_restores_width(self):
        layout = PanelLayout()
        layout.resize("sidebar", 300)
        assert layout.toggle("sidebar") is True
        assert layout.sidebar.effective_width == MINIMIZED_WIDTH
        assert layout.toggle("sidebar") is False
        assert layout.sidebar.width == 300

    def test_container_shrink_clamps_open_panels(self):
        layout = PanelLayout(container_width=1440, assistant_width=500)
        layout.set_container_width(800)
        assert layout.assistant.width == 320

    def test_column_ratios_sum_to_one(self):
        layout = PanelLayout()
        ratios = layout.column_ratios()
        assert sum(ratios) == pytest.approx(1.0)
        assert ratios[1] > ratios[0]

    def test_unknown_panel(self):
        with pytest.raises(KeyError):
            PanelLayout().toggle("footer")


class TestRequestGenerations:
    """Stale-response detection."""

    def test_advance_invalidates(self):
        generations = RequestGenerations()
        token = generations.advance(VIEW)
        assert generations.is_current(token)
        generations.advance(VIEW)
        assert not generations.is_current(token)

    def test_channels_independent(self):
        generations = RequestGenerations()
        view = generations.advance(VIEW)
        generations.advance(ENROLLMENT)
        assert generations.is_current(view)

    def test_current_does_not_advance(self):
        generations = RequestGenerations()
        token = generations.current(VIEW)
        assert generations.is_current(token)
        assert generations.current(VIEW) == token
