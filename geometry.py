"""
Scroll and banner geometry for the main page.

Everything here is a pure function of plain numbers: viewport size, scroll
offset and element rects. Rects are in document coordinates
(``bounding_rect.top + scrollY``) unless a function says viewport.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

MOBILE_BREAKPOINT = 768
SAFE_MARGIN = 16
MIN_BANNER_WIDTH = 280
FRAME_TOLERANCE = 0.5
SECTION_ORDER = ("home", "cv", "portfolio")

# scroll-to gaps, px
SCROLL_TOP_GAP = 16
SCROLL_BOTTOM_GAP = 24
# banner float / stop thresholds, px
FLOAT_LEAD = 40
STOP_GAP = 12
MIN_STOP_GAP = 8


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class BannerFrame:
    code: str
    title: str
    left: float
    width: float
    top: float


def is_narrow(viewport_width: float) -> bool:
    return viewport_width <= MOBILE_BREAKPOINT


def scroll_offset(viewport_width: float, mobile_nav_height: float) -> float:
    """Height hidden under the mobile nav bar; zero on desktop."""
    return mobile_nav_height if is_narrow(viewport_width) else 0


def reference_line(scroll_y: float, offset: float, viewport_height: float) -> float:
    return scroll_y + offset + viewport_height * 0.25


def current_section(section_tops: Dict[str, Optional[float]], reference: float) -> str:
    current = "home"
    for key in SECTION_ORDER:
        top = section_tops.get(key)
        if top is None:
            continue
        if reference >= top:
            current = key
    return current


def active_item(item_tops: Iterable[Tuple[str, Optional[float]]], reference: float) -> Optional[str]:
    """Last item, in page order, whose top has crossed the reference line."""
    active = None
    for code, top in item_tops:
        if top is not None and reference >= top:
            active = code
    return active


def scroll_top_for(element_top: float, offset: float) -> float:
    return max(element_top - offset - SCROLL_TOP_GAP, 0)


def scroll_bottom_for(element_bottom: float, viewport_height: float, offset: float) -> float:
    return max(element_bottom - viewport_height + offset + SCROLL_BOTTOM_GAP, 0)


def should_float(
    scroll_y: float,
    offset: float,
    summary_bottom: float,
    details_bottom: float,
    banner_height: float,
) -> bool:
    """Whether the sticky banner of an expanded work should be floating.

    It floats once the summary block is scrolled past, and stops before the
    end of the details block so it never covers the next work.
    """
    floating_top = scroll_y + offset
    stop_threshold = max(details_bottom - banner_height - STOP_GAP, summary_bottom + MIN_STOP_GAP)
    bottom_limit = details_bottom - STOP_GAP
    return (
        scroll_y + offset + FLOAT_LEAD > summary_bottom
        and floating_top <= stop_threshold
        and floating_top < bottom_limit
    )


def clamp_banner(banner: Rect, viewport_width: float) -> Tuple[float, float]:
    """Clamp the banner's viewport rect to the screen; returns ``(left, width)``."""
    left = banner.left
    width = banner.width

    if left < SAFE_MARGIN:
        delta = SAFE_MARGIN - left
        left = SAFE_MARGIN
        width = max(width - delta, MIN_BANNER_WIDTH)

    overflow_right = left + width + SAFE_MARGIN - viewport_width
    if overflow_right > 0:
        shift = min(overflow_right, left - SAFE_MARGIN)
        if shift > 0:
            left -= shift
            overflow_right -= shift
        if overflow_right > 0:
            width = max(width - overflow_right, MIN_BANNER_WIDTH)

    available = viewport_width - left - SAFE_MARGIN
    if available <= 0:
        left = SAFE_MARGIN
        available = max(viewport_width - SAFE_MARGIN * 2, 0)
    return left, min(width, available)


def banner_frame(
    code: str,
    title: str,
    banner: Rect,
    viewport_width: float,
    offset: float,
) -> BannerFrame:
    left, width = clamp_banner(banner, viewport_width)
    return BannerFrame(code=code, title=title, left=left, width=width, top=offset)


def frames_equal(a: Optional[BannerFrame], b: Optional[BannerFrame]) -> bool:
    if a is None or b is None:
        return a is b
    return (
        a.code == b.code
        and a.title == b.title
        and abs(a.left - b.left) < FRAME_TOLERANCE
        and abs(a.width - b.width) < FRAME_TOLERANCE
        and abs(a.top - b.top) < FRAME_TOLERANCE
    )


def banner_style(frame: BannerFrame, viewport_width: float) -> Dict[str, str]:
    if is_narrow(viewport_width):
        return {"top": f"{frame.top:g}px", "left": "0", "right": "0", "width": "100%"}
    return {"top": f"{frame.top:g}px", "left": f"{frame.left:g}px", "width": f"{frame.width:g}px"}


def reading_progress(details_top: float, details_height: float, viewport_height: float) -> float:
    """Percent of the details block scrolled into view; ``details_top`` is a viewport coordinate."""
    if details_height <= 0:
        return 0.0
    share = (viewport_height - details_top) / details_height
    return max(0.0, min(1.0, share)) * 100

