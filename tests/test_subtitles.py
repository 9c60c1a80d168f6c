"""Tests for subtitle selection and the caption box."""

from reelforge.render.subtitles import SubtitleStyle, select_subtitle, subtitle_box
from reelforge.schemas.project import Project


class TestSelectSubtitle:
    def test_active_subtitle(self, project: Project):
        assert select_subtitle(project.subtitles, 500).text == "First line"
        assert select_subtitle(project.subtitles, 2500).text == "Second line"

    def test_boundary_belongs_to_next(self, project: Project):
        """Windows are half-open: 2.0s is the second subtitle, not the first."""
        assert select_subtitle(project.subtitles, 2000).text == "Second line"

    def test_none_after_last(self, project: Project):
        assert select_subtitle(project.subtitles, 4000) is None

    def test_first_match_on_overlap(self, make_project):
        project = make_project(
            subtitles=[
                {"start": 0, "end": 3, "text": "a"},
                {"start": 1, "end": 2, "text": "b"},
            ]
        )
        assert select_subtitle(project.subtitles, 1500).text == "a"

    def test_empty_list(self):
        assert select_subtitle([], 0) is None


class TestSubtitleBox:
    def test_centered_box(self):
        box = subtitle_box(1080, "Hello")
        assert box.x == 142
        assert box.y == 1400
        assert (box.w, box.h, box.radius) == (796, 138, 69)
        assert box.text == "Hello"

    def test_style_defaults(self):
        box = subtitle_box(1080, "Hello")
        data = box.to_dict()
        assert data["font"] == "54px YSText, system-ui"
        assert data["blurPx"] == 64
        assert data["tintColor"] == "rgba(0,0,0,0.35)"
        assert data["fallbackColor"] == "rgba(0,0,0,0.65)"

    def test_custom_style(self):
        box = subtitle_box(720, "x", SubtitleStyle(box_width=500, top=900))
        assert box.x == 110
        assert box.y == 900
