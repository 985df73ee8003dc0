import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

import config
from catalog import Portfolio, build_portfolio
from cv import normalise_skill_groups
from routing import DEFAULT_ROUTE
from schemas import (
    BlobConfig,
    CvRouteConfig,
    CvSettings,
    ExperienceDataset,
    FooterConfig,
    FooterContent,
    HomeConfig,
    HomeContent,
    PortfolioItem,
    ResolvedProfile,
    RouteEntry,
    SkillGroup,
    WorkDetail,
)

logger = logging.getLogger(__name__)

ROUTES_FILE = "portfolioRoutes.json"
WORK_DATA_FILE = "allWorkData.json"
PORTFOLIO_MAP_FILE = "portfolioMap.json"
EXPERIENCE_FILE = "experience.json"
SKILLS_FILE = "skillsData.json"
PUBLISH_FILE = "publishData.json"

DEFAULT_BLOBS = [
    BlobConfig(id="blob-1", label="User\nExperience\nResearch", size="large", x="25%", y="10%", width="40%", color="#fd9225", animDuration=7, animDelay=0),
    BlobConfig(id="blob-2", label="Data\nAnalysis", size="large", x="5%", y="40%", width="40%", color="#44acaf", animDuration=8, animDelay=1),
    BlobConfig(id="blob-3", label="Design\nDevelopment", size="large", x="40%", y="45%", width="40%", color="#ff6b6b", animDuration=6, animDelay=2),
    BlobConfig(id="blob-4", label="Behavior\n&\nNeeds\nAnalysis", size="small", x="15%", y="15%", animDuration=9, animDelay=0.5),
    BlobConfig(id="blob-5", label="Interactive\nDesign", size="small", x="65%", y="25%", animDuration=7.5, animDelay=1.5),
    BlobConfig(id="blob-6", label="Visualization\nDashboard", size="small", x="35%", y="50%", animDuration=8.5, animDelay=2.5),
    BlobConfig(id="blob-7", label="Industrial\nDesign", size="small", x="75%", y="40%", animDuration=6.5, animDelay=1.2),
    BlobConfig(id="blob-8", label="Modeling\n&\nPrediction", size="small", x="5%", y="30%", animDuration=7, animDelay=0.8),
    BlobConfig(id="blob-9", label="AI\nApplication", size="small", x="30%", y="75%", animDuration=8, animDelay=1.8),
]

DEFAULT_HOME_CONTENT = HomeContent(
    badge="Portfolio Template",
    title="Design × Research × Development",
    intro=[
        "Hello! Welcome to this portfolio template. Replace this text in portfolioRoutes.json with your own introduction.",
        "This template supports multiple route configurations, bilingual content (Chinese/English), and customizable project categories.",
    ],
    blobs=DEFAULT_BLOBS,
)

DEFAULT_FOOTER_CONTENT = FooterContent(
    title="Your Name",
    message="Thank you for reading. Feel free to reach out!",
    email="your.email@example.com",
)


# =========
# Utilities
# =========

def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def pick_text(lang: str, zh: Optional[str], en: Optional[str]) -> str:
    """Prefer the English field on English routes, else the non-English one."""
    if lang == "en" and _clean(en):
        return _clean(en)
    return _clean(zh)


def display_title(item: PortfolioItem, lang: str) -> str:
    detail = item.detail
    if lang == "en":
        return _clean(detail.tableNameEn or detail.fullNameEn or detail.tableName or detail.fullName) or item.name
    return _clean(detail.tableName or detail.fullName) or item.name


def year_range_text(detail: WorkDetail) -> str:
    start = _clean(detail.yearBegin)
    end = _clean(detail.yearEnd)
    if start and end and start != end:
        return f"{start} – {end}"
    return start or end


def normalise_home_intro(value) -> List[str]:
    if not value:
        return []
    source = value if isinstance(value, list) else value.split("\n")
    return [line.replace("\r", "").strip() for line in source if line and line.replace("\r", "").strip()]


def normalise_home_content(
    home: Optional[HomeConfig],
    fallback: HomeContent,
    route_blobs: Optional[List[BlobConfig]] = None,
) -> HomeContent:
    home = home or HomeConfig()
    intro = normalise_home_intro(home.intro)
    if home.blobs:
        blobs = home.blobs
    elif route_blobs:
        blobs = route_blobs
    else:
        blobs = fallback.blobs
    return HomeContent(
        badge=_clean(home.badge) or fallback.badge,
        title=_clean(home.title) or fallback.title,
        intro=intro or fallback.intro,
        blobs=blobs,
    )


def normalise_footer_content(footer: Optional[FooterConfig], fallback: FooterContent) -> FooterContent:
    footer = footer or FooterConfig()
    return FooterContent(
        title=_clean(footer.title) or fallback.title,
        message=_clean(footer.message) or fallback.message,
        email=_clean(footer.email) or fallback.email,
    )


def normalise_group_list(groups) -> Optional[List[str]]:
    if not groups:
        return None
    cleaned = []
    for group in groups:
        group = _clean(group)
        if group and group not in cleaned:
            cleaned.append(group)
    return cleaned or None


def normalise_cv_route(cv) -> Tuple[Optional[str], Optional[str], Optional[List[str]]]:
    """Return ``(asset, link, groups)`` for a route's ``cv`` value."""
    if not cv:
        return None, None, None
    if isinstance(cv, str):
        return _clean(cv) or None, None, None
    if isinstance(cv, CvRouteConfig):
        source = cv.showGroups if cv.showGroups is not None else cv.showTypes
        return _clean(cv.asset) or None, _clean(cv.link) or None, normalise_group_list(source)
    return None, None, None


# =============
# Content store
# =============

class ContentStore:
    """Reads the JSON content files and resolves route profiles.

    Files are cached by modification time, so a save through the admin API
    is picked up by the next request.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self._cache: Dict[str, Tuple[int, Any]] = {}

    def load_json(self, filename: str, default: Any) -> Any:
        path = self.data_dir / filename
        try:
            mtime = path.stat().st_mtime_ns
        except OSError:
            logger.warning("Content file %s is missing", path)
            return default

        cached = self._cache.get(filename)
        if cached and cached[0] == mtime:
            return cached[1]

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Invalid data in %s, using empty structure: %s", filename, exc)
            data = default
        if not isinstance(data, type(default)):
            logger.warning("Unexpected top-level type in %s", filename)
            data = default
        self._cache[filename] = (mtime, data)
        return data

    # -- raw tables --

    def route_table(self) -> Dict[str, RouteEntry]:
        table = {}
        for key, raw in self.load_json(ROUTES_FILE, {}).items():
            try:
                table[key.lower()] = RouteEntry.model_validate(raw or {})
            except ValidationError as exc:
                logger.warning("Skipping malformed route %r: %s", key, exc.errors()[:1])
        table.setdefault(DEFAULT_ROUTE, RouteEntry())
        return table

    def work_details(self) -> Dict[str, WorkDetail]:
        details = {}
        for code, raw in self.load_json(WORK_DATA_FILE, {}).items():
            try:
                details[code] = WorkDetail.model_validate(raw or {})
            except ValidationError as exc:
                logger.warning("Skipping malformed work %r: %s", code, exc.errors()[:1])
        return details

    def portfolio_map(self) -> Dict[str, str]:
        return {code: str(name) for code, name in self.load_json(PORTFOLIO_MAP_FILE, {}).items() if name}

    def experience(self) -> ExperienceDataset:
        try:
            return ExperienceDataset.model_validate(self.load_json(EXPERIENCE_FILE, {}))
        except ValidationError as exc:
            logger.warning("Invalid experience data: %s", exc.errors()[:1])
            return ExperienceDataset()

    def skills(self) -> list:
        return self.load_json(SKILLS_FILE, {}).get("groups") or []

    def publications(self) -> list:
        return self.load_json(PUBLISH_FILE, {}).get("groups") or []

    # -- resolution --

    def portfolio(self, route_key: str) -> Portfolio:
        routes = self.route_table()
        default = routes[DEFAULT_ROUTE]
        entry = routes.get(route_key.lower(), RouteEntry())
        return build_portfolio(entry.categories, default.categories, self.work_details(), self.portfolio_map())

    def resolve(self, route_key: str) -> ResolvedProfile:
        routes = self.route_table()
        default = routes[DEFAULT_ROUTE]
        entry = routes.get(route_key.lower(), RouteEntry())

        portfolio = self.portfolio(route_key)

        lang = entry.lang or default.lang or "zh"
        site_title = (pick_text(lang, entry.siteTitle, entry.siteTitleEn)
                      or pick_text(lang, default.siteTitle, default.siteTitleEn) or "Portfolio")
        sidebar_title = (pick_text(lang, entry.sidebarTitle, entry.sidebarTitleEn)
                         or pick_text(lang, default.sidebarTitle, default.sidebarTitleEn) or "YOUR NAME")

        default_home = normalise_home_content(default.home, DEFAULT_HOME_CONTENT, default.blobs)
        default_footer = normalise_footer_content(default.footer, DEFAULT_FOOTER_CONTENT)

        raw_skills = entry.skills or default.skills
        route_skills: Optional[List[SkillGroup]] = normalise_skill_groups(raw_skills) if raw_skills else None

        return ResolvedProfile(
            categories=portfolio.categories,
            portfolioItems=portfolio.items,
            cvSettings=self.cv_settings(entry, default),
            homeContent=normalise_home_content(entry.home, default_home, entry.blobs),
            footerContent=normalise_footer_content(entry.footer, default_footer),
            siteTitle=site_title,
            sidebarTitle=sidebar_title,
            cvSummary=entry.cvSummary if entry.cvSummary is not None else default.cvSummary,
            routeSkills=route_skills or None,
            lang=lang,
        )

    def cv_settings(self, entry: RouteEntry, default: RouteEntry) -> CvSettings:
        asset, link, groups = normalise_cv_route(entry.cv)
        default_asset, default_link, default_groups = normalise_cv_route(default.cv)
        asset = asset or default_asset
        return CvSettings(
            downloadUrl=f"{config.CV_ASSET_BASE_URL}{asset}" if asset else None,
            link=link or default_link,
            groups=groups or default_groups,
        )
