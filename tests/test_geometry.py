import pytest

from geometry import (
    BannerFrame,
    Rect,
    active_item,
    banner_style,
    clamp_banner,
    current_section,
    frames_equal,
    reading_progress,
    reference_line,
    scroll_bottom_for,
    scroll_offset,
    scroll_top_for,
    should_float,
)

SECTIONS = {"home": 0, "cv": 1000, "portfolio": 2000}


def test_reference_line_and_offset():
    assert reference_line(100, 0, 800) == 300
    assert scroll_offset(700, 56) == 56
    assert scroll_offset(768, 56) == 56
    assert scroll_offset(1024, 56) == 0


@pytest.mark.parametrize("reference,expected", [
    (500, "home"),
    (1000, "cv"),
    (1100, "cv"),
    (2500, "portfolio"),
])
def test_current_section(reference, expected):
    assert current_section(SECTIONS, reference) == expected


def test_current_section_skips_unmounted_sections():
    assert current_section({"home": 0, "cv": None, "portfolio": 2000}, 1500) == "home"
    assert current_section({}, 1500) == "home"


def test_active_item():
    tops = [("a", 100), ("b", None), ("c", 900)]
    assert active_item(tops, 50) is None
    assert active_item(tops, 500) == "a"
    assert active_item(tops, 900) == "c"


def test_scroll_targets():
    assert scroll_top_for(500, 56) == 428
    assert scroll_top_for(10, 0) == 0
    assert scroll_bottom_for(3000, 800, 0) == 2224


def test_should_float():
    args = dict(offset=0, summary_bottom=1000, details_bottom=3000, banner_height=60)
    assert not should_float(900, **args)
    assert should_float(1500, **args)
    assert not should_float(2950, **args)


def test_clamp_banner_left_margin():
    assert clamp_banner(Rect(left=0, top=0, width=500, height=50), 1280) == (16, 484)


def test_clamp_banner_shifts_before_shrinking():
    assert clamp_banner(Rect(left=900, top=0, width=500, height=50), 1280) == (764, 500)


def test_clamp_banner_never_exceeds_viewport():
    left, width = clamp_banner(Rect(left=16, top=0, width=400, height=50), 300)
    assert left == 16
    assert width == 268


def test_frames_equal_tolerance():
    frame = BannerFrame("mc5", "Motion", left=100, width=600, top=0)
    assert frames_equal(frame, BannerFrame("mc5", "Motion", left=100.3, width=599.8, top=0.1))
    assert not frames_equal(frame, BannerFrame("mc5", "Motion", left=100.6, width=600, top=0))
    assert not frames_equal(frame, BannerFrame("ux3", "Motion", left=100, width=600, top=0))
    assert not frames_equal(frame, None)
    assert frames_equal(None, None)


def test_banner_style_is_full_width_on_narrow_viewports():
    frame = BannerFrame("mc5", "Motion", left=100, width=600, top=56)
    assert banner_style(frame, 500) == {"top": "56px", "left": "0", "right": "0", "width": "100%"}
    assert banner_style(frame, 1280) == {"top": "56px", "left": "100px", "width": "600px"}


def test_reading_progress():
    assert reading_progress(400, 800, 800) == pytest.approx(50)
    assert reading_progress(900, 800, 800) == 0
    assert reading_progress(-2000, 800, 800) == 100
    assert reading_progress(0, 0, 800) == 0
