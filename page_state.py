"""
Navigation state of the main page.

``PageState`` is the single state object behind the sidebar, the portfolio
list and the floating banner. Transitions return a ``ScrollRequest`` when the
view has to move; applying it (smoothly, on the next frame) is up to the view.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import geometry
from catalog import Portfolio
from content import display_title
from geometry import BannerFrame, Rect
from schemas import ContentKey

logger = logging.getLogger(__name__)

SECTION_ANCHORS = {
    "home": "home-section",
    "cv": "cv-section",
    "portfolio": "portfolio-section",
}


def work_anchor(code: str, part: Optional[str] = None) -> str:
    return f"portfolio-{code}-{part}" if part else f"portfolio-{code}"


@dataclass(frozen=True)
class ScrollRequest:
    anchor: str
    align: str = "top"  # "top" or "bottom"


@dataclass
class WorkLayout:
    summary: Rect  # document coordinates
    details: Optional[Rect] = None  # document coordinates, expanded works only
    banner: Optional[Rect] = None  # viewport coordinates


@dataclass
class ScrollSnapshot:
    """Everything a scroll/resize tick needs, read from the DOM in one pass."""

    scroll_y: float
    viewport_width: float
    viewport_height: float
    mobile_nav_height: float = 0
    sections: Dict[str, Optional[Rect]] = field(default_factory=dict)
    works: Dict[str, WorkLayout] = field(default_factory=dict)

    @property
    def offset(self) -> float:
        return geometry.scroll_offset(self.viewport_width, self.mobile_nav_height)

    def anchor_rect(self, anchor: str) -> Optional[Rect]:
        for key, section_anchor in SECTION_ANCHORS.items():
            if anchor == section_anchor:
                return self.sections.get(key)
        for code, layout in self.works.items():
            if anchor in (work_anchor(code), work_anchor(code, "summary")):
                return layout.summary
            if anchor == work_anchor(code, "details"):
                return layout.details
        return None


def scroll_position(request: ScrollRequest, snapshot: ScrollSnapshot) -> Optional[float]:
    """Window scroll offset for ``request``, or None if its anchor is not laid out."""
    rect = snapshot.anchor_rect(request.anchor)
    if rect is None:
        return None
    if request.align == "bottom":
        return geometry.scroll_bottom_for(rect.bottom, snapshot.viewport_height, snapshot.offset)
    return geometry.scroll_top_for(rect.top, snapshot.offset)


class PageState:
    def __init__(self, portfolio: Portfolio, lang: str = "zh"):
        self.portfolio = portfolio
        self.lang = lang
        self.selected_content: ContentKey = "home"
        self.active_portfolio: Optional[str] = None
        self.expanded_works: List[str] = []
        self.expanded_categories: List[str] = []
        self.is_mobile_nav_open = False
        self.floating_banner: Optional[BannerFrame] = None
        self.progress = 0.0
        self._last_section = "home"
        self._deep_link_handled = False

    # ===========
    # Transitions
    # ===========

    def toggle_work(self, code: str) -> Optional[ScrollRequest]:
        if code in self.expanded_works:
            self.expanded_works.remove(code)
            # keep the collapsed work's summary in view
            return ScrollRequest(work_anchor(code, "summary"))
        self.expanded_works.append(code)
        return None

    def toggle_category(self, name: str) -> None:
        if name in self.expanded_categories:
            self.expanded_categories.remove(name)
        else:
            self.expanded_categories.append(name)

    def expand_category(self, name: Optional[str], collapse_others: bool = False) -> None:
        if not name:
            return
        if collapse_others:
            self.expanded_categories = [name]
        elif name not in self.expanded_categories:
            self.expanded_categories.append(name)

    def set_mobile_nav_open(self, is_open: bool) -> None:
        self.is_mobile_nav_open = is_open

    def _close_nav_on_mobile(self, viewport_width: float) -> None:
        if geometry.is_narrow(viewport_width):
            self.is_mobile_nav_open = False

    def navigate_portfolio(self, code: Optional[str], viewport_width: float) -> ScrollRequest:
        """Sidebar click on the portfolio heading or one of its works."""
        self.selected_content = "portfolio"
        self._close_nav_on_mobile(viewport_width)
        if not code:
            self.active_portfolio = None
            return ScrollRequest(SECTION_ANCHORS["portfolio"])

        self.active_portfolio = code
        # accordion on desktop only
        self.expand_category(
            self.portfolio.category_of(code),
            collapse_others=not geometry.is_narrow(viewport_width),
        )
        return ScrollRequest(work_anchor(code))

    def select_content(self, key: str, viewport_width: float) -> ScrollRequest:
        if key == "portfolio":
            return self.navigate_portfolio(None, viewport_width)
        self.selected_content = key
        self._close_nav_on_mobile(viewport_width)
        self.active_portfolio = None
        return ScrollRequest(SECTION_ANCHORS[key])

    def apply_deep_link(self, code: Optional[str], viewport_width: float) -> Optional[ScrollRequest]:
        """Open the work named in the URL, once per route. Unknown codes are ignored."""
        if not code or self._deep_link_handled:
            return None
        item = self.portfolio.find(code)
        if item is None:
            logger.debug("Ignoring unknown deep-linked work %s", code)
            return None
        self._deep_link_handled = True
        request = self.navigate_portfolio(item.code, viewport_width)
        if item.code not in self.expanded_works:
            self.expanded_works.append(item.code)
        return request

    def reset_for_route(self, portfolio: Portfolio, lang: Optional[str] = None) -> None:
        self.portfolio = portfolio
        if lang:
            self.lang = lang
        codes = set(portfolio.codes)
        self.expanded_categories = []
        self.expanded_works = [code for code in self.expanded_works if code in codes]
        if self.active_portfolio not in codes:
            self.active_portfolio = None
        self.floating_banner = None
        self._deep_link_handled = False

    # ==========
    # Scroll spy
    # ==========

    def on_scroll(self, snapshot: ScrollSnapshot) -> None:
        offset = snapshot.offset
        reference = geometry.reference_line(snapshot.scroll_y, offset, snapshot.viewport_height)

        tops = {key: (rect.top if rect else None) for key, rect in snapshot.sections.items()}
        section = geometry.current_section(tops, reference)
        if section != self._last_section:
            self._last_section = section
            self.selected_content = section

        if self.selected_content != "portfolio":
            self.active_portfolio = None
        else:
            self._track_active_work(snapshot, reference)

        self.update_banner(snapshot)
        self.update_progress(snapshot)

    def _track_active_work(self, snapshot: ScrollSnapshot, reference: float) -> None:
        item_tops = []
        for code in self.portfolio.codes:
            layout = snapshot.works.get(code)
            item_tops.append((code, layout.summary.top if layout else None))
        code = geometry.active_item(item_tops, reference)
        if code is None:
            return
        self.active_portfolio = code
        self.expand_category(self.portfolio.category_of(code))

    def update_banner(self, snapshot: ScrollSnapshot) -> Optional[BannerFrame]:
        code = self.active_portfolio
        item = self.portfolio.find(code)
        layout = snapshot.works.get(code) if code else None
        if (
            item is None
            or code not in self.expanded_works
            or layout is None
            or layout.details is None
            or layout.banner is None
        ):
            self.floating_banner = None
            return None

        offset = snapshot.offset
        if not geometry.should_float(
            snapshot.scroll_y,
            offset,
            layout.summary.bottom,
            layout.details.bottom,
            layout.banner.height,
        ):
            self.floating_banner = None
            return None

        frame = geometry.banner_frame(
            code,
            display_title(item, self.lang),
            layout.banner,
            snapshot.viewport_width,
            offset,
        )
        if not geometry.frames_equal(self.floating_banner, frame):
            self.floating_banner = frame
        return self.floating_banner

    def update_progress(self, snapshot: ScrollSnapshot) -> float:
        code = self.active_portfolio
        layout = snapshot.works.get(code) if code else None
        if code not in self.expanded_works or layout is None or layout.details is None:
            self.progress = 0.0
        else:
            details = layout.details
            self.progress = geometry.reading_progress(
                details.top - snapshot.scroll_y, details.height, snapshot.viewport_height
            )
        return self.progress

    def banner_action(self, action: str, snapshot: ScrollSnapshot) -> Optional[ScrollRequest]:
        """Floating banner buttons: ``top``, ``bottom`` or ``collapse``."""
        frame = self.floating_banner
        if frame is None:
            return None
        if action == "top":
            return ScrollRequest(work_anchor(frame.code))
        if action == "bottom":
            return ScrollRequest(work_anchor(frame.code, "details"), align="bottom")
        if action == "collapse":
            self.floating_banner = None
            return self.toggle_work(frame.code)
        raise ValueError(f"Unknown banner action: {action}")

    def to_dict(self, viewport_width: Optional[float] = None) -> dict:
        banner = None
        if self.floating_banner is not None:
            banner = {
                "code": self.floating_banner.code,
                "title": self.floating_banner.title,
                "left": self.floating_banner.left,
                "width": self.floating_banner.width,
                "top": self.floating_banner.top,
            }
            if viewport_width is not None:
                banner["style"] = geometry.banner_style(self.floating_banner, viewport_width)
        return {
            "selectedContent": self.selected_content,
            "activePortfolio": self.active_portfolio,
            "expandedWorks": list(self.expanded_works),
            "expandedCategories": list(self.expanded_categories),
            "isMobileNavOpen": self.is_mobile_nav_open,
            "floatingBanner": banner,
            "progress": self.progress,
        }


class ScrollCoalescer:
    """Keeps at most one pending scroll snapshot per frame.

    ``schedule`` replaces any pending snapshot; ``flush`` (the animation
    frame) applies only the latest one.
    """

    def __init__(self, state: PageState):
        self.state = state
        self._pending: Optional[ScrollSnapshot] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, snapshot: ScrollSnapshot) -> None:
        self._pending = snapshot

    def cancel(self) -> None:
        self._pending = None

    def flush(self) -> bool:
        snapshot, self._pending = self._pending, None
        if snapshot is None:
            return False
        self.state.on_scroll(snapshot)
        return True
