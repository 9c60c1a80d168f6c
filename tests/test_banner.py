"""Tests for the news banner phase compression and per-frame state."""

import pytest

from reelforge.render.banner import (
    NOMINAL_PHASES_MS,
    NOMINAL_TOTAL_MS,
    PHASE_FLOORS_MS,
    PHASE_NAMES,
    BannerStyle,
    banner_command,
    banner_state,
    banner_window_ms,
    compute_phases,
)
from reelforge.render.draw_commands import CommandType
from reelforge.schemas.project import NewsBannerOverlay


def _banner(**fields) -> NewsBannerOverlay:
    data = {"newsTitle": "Breaking news from the studio", "start": 1, "end": 6.3}
    data.update(fields)
    return NewsBannerOverlay.model_validate(data)


class TestComputePhases:
    @pytest.mark.parametrize("available", [NOMINAL_TOTAL_MS, NOMINAL_TOTAL_MS + 1, 60000])
    def test_nominal_when_window_is_long_enough(self, available):
        phases = compute_phases(available)
        assert phases.durations() == tuple(NOMINAL_PHASES_MS[n] for n in PHASE_NAMES)

    def test_phases_fill_every_short_window(self):
        """Compressed phases sum exactly to the window for every length."""
        for available in range(1, NOMINAL_TOTAL_MS):
            phases = compute_phases(available)
            assert phases.total == available, available
            assert sum(phases.durations()) == available
            assert phases.collapse >= 1
            assert all(d >= 0 for d in phases.durations())

    def test_floors_hold_when_window_allows(self):
        for available in (10, 100, 1000, 5000):
            durations = dict(zip(PHASE_NAMES, compute_phases(available).durations()))
            for name, floor in PHASE_FLOORS_MS.items():
                assert durations[name] >= floor

    def test_half_window(self):
        """Pass 1 halves every phase; pass 2 puts the drift on collapse."""
        phases = compute_phases(2650)
        assert (phases.grow, phases.delay, phases.text_fade, phases.hold, phases.text_out) == (
            150,
            50,
            100,
            2000,
            100,
        )
        assert phases.collapse == 250

    def test_tiny_window(self):
        phases = compute_phases(1)
        assert phases.durations() == (0, 0, 0, 0, 0, 1)

    def test_non_positive_window_treated_as_one(self):
        assert compute_phases(0).total == 1
        assert compute_phases(-50).total == 1

    def test_threshold_boundary(self):
        """Just below 5300ms the phases fill the window; at 5300 they are nominal."""
        below = compute_phases(NOMINAL_TOTAL_MS - 1)
        assert below.total == NOMINAL_TOTAL_MS - 1
        assert below.collapse == 500
        at = compute_phases(NOMINAL_TOTAL_MS)
        assert at.total == 5100
        assert at.collapse == 300

    def test_boundaries(self):
        phases = compute_phases(NOMINAL_TOTAL_MS)
        assert phases.text_start == 400
        assert phases.text_visible == 600
        assert phases.text_out_start == 4600
        assert phases.collapse_start == 4800
        assert phases.total == 5100


class TestBannerWindow:
    def test_explicit_window(self):
        assert banner_window_ms(_banner()) == (1000, 5300)

    def test_missing_end_uses_nominal_total(self):
        assert banner_window_ms(_banner(end=None)) == (1000, NOMINAL_TOTAL_MS)

    def test_empty_title_draws_nothing(self, measurer):
        overlay = _banner(newsTitle="")
        assert banner_state(overlay, 2000, 1080, measurer) is None
        assert banner_command(overlay, 2000, 1080, measurer) is None

    def test_missing_start_is_inactive(self, measurer):
        overlay = _banner(start=None)
        assert banner_window_ms(overlay) is None
        assert banner_state(overlay, 2000, 1080, measurer) is None


class TestBannerState:
    def test_hidden_outside_envelope(self, measurer):
        overlay = _banner()
        assert banner_state(overlay, 999, 1080, measurer) is None
        assert banner_state(overlay, 1000 + 5101, 1080, measurer) is None

    def test_grow_start(self, measurer):
        state = banner_state(_banner(), 1000, 1080, measurer)
        assert state.bar_h == 146
        assert state.bar_y == 1396
        assert state.bar_alpha == 0.0
        assert state.text_alpha == 0.0
        assert state.lines == []

    def test_fully_grown_keeps_bottom_edge(self, measurer):
        state = banner_state(_banner(), 1300, 1080, measurer)
        style = BannerStyle()
        assert state.bar_h == 473
        assert state.bar_y + state.bar_h == style.bar_bottom
        assert state.bar_alpha == 1.0
        assert state.bar_x == 138
        assert state.text_x == 188
        assert state.text_y == state.bar_y + 50

    def test_text_fade_in(self, measurer):
        state = banner_state(_banner(), 1500, 1080, measurer)
        assert state.text_alpha == pytest.approx(0.5)
        assert state.lines == ["Breaking news from the studio"]

    def test_hold(self, measurer):
        state = banner_state(_banner(), 3000, 1080, measurer)
        assert state.text_alpha == 1.0
        assert state.bar_alpha == 1.0

    def test_collapse(self, measurer):
        state = banner_state(_banner(), 1000 + 4950, 1080, measurer)
        assert state.bar_alpha == pytest.approx(0.5)
        assert state.bar_h == 187
        assert state.bar_y == 1355
        assert state.text_alpha == 0.0
        assert state.lines == []

    def test_collapse_end(self, measurer):
        state = banner_state(_banner(), 1000 + 5100, 1080, measurer)
        assert state.bar_alpha == 0.0
        assert state.bar_h == 146

    def test_lines_capped_to_bar_height(self, measurer):
        """Overflowing lines are dropped silently."""
        overlay = _banner(newsTitle=" ".join(["word"] * 100))
        state = banner_state(overlay, 3000, 1080, measurer)
        assert BannerStyle().max_lines == 5
        assert len(state.lines) == 5
        assert all(len(line) * 10 <= 704 for line in state.lines)

    def test_style_values(self):
        style = BannerStyle()
        assert style.line_height == 77
        assert style.font == "400 70px YSText, system-ui"
        assert style.bar_bottom == 1542


class TestBannerCommand:
    def test_command_carries_z(self, measurer):
        command = banner_command(_banner(z=7), 3000, 1080, measurer)
        assert command.type == CommandType.BANNER
        assert command.z == 7
        assert command.banner.bar_color == "#F8604A"
        assert command.to_dict()["banner"]["barW"] == 804

    def test_default_z(self, measurer):
        assert banner_command(_banner(), 3000, 1080, measurer).z == 100

    def test_none_when_hidden(self, measurer):
        assert banner_command(_banner(), 0, 1080, measurer) is None
