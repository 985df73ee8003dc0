import logging
from typing import Dict, Iterable, List, Mapping, Optional

from schemas import CategoryRef, PortfolioCategory, PortfolioItem, WorkDetail

logger = logging.getLogger(__name__)

# Always rendered as the last category regardless of declared order
SPECIAL_CATEGORY_NAME = "其他作品專案"
FALLBACK_CATEGORY_NAME = "作品集"


def create_fallback_detail(name: str) -> WorkDetail:
    return WorkDetail(fullName=name, tableName=name, content="")


def _entry_code_and_name(entry):
    if isinstance(entry, CategoryRef):
        return entry.code, (entry.name or "").strip() or None
    if isinstance(entry, dict):
        return str(entry.get("code") or ""), (entry.get("name") or "").strip() or None
    if isinstance(entry, str):
        return entry, None
    return "", None


class Portfolio:
    """Categories for one route plus the flattened, de-duplicated item list."""

    def __init__(self, categories: List[PortfolioCategory]):
        self.categories = categories
        seen = set()
        self.items: List[PortfolioItem] = []
        for category in categories:
            for item in category.items:
                if item.code in seen:
                    continue
                seen.add(item.code)
                self.items.append(item)

    def find(self, code: Optional[str]) -> Optional[PortfolioItem]:
        if not code:
            return None
        lowered = code.lower()
        for item in self.items:
            if item.code.lower() == lowered:
                return item
        return None

    def category_of(self, code: str) -> Optional[str]:
        for category in self.categories:
            if code in category.itemsMap:
                return category.name
        return None

    @property
    def codes(self) -> List[str]:
        return [item.code for item in self.items]


def known_codes(work_details: Mapping[str, WorkDetail], portfolio_map: Mapping[str, str]) -> Dict[str, str]:
    """Lowercased code -> canonical code over every code the site knows about."""
    codes = sorted(set(portfolio_map) | set(work_details))
    return {code.lower(): code for code in codes}


def display_name(code: str, work_details: Mapping[str, WorkDetail], portfolio_map: Mapping[str, str]) -> str:
    name = (portfolio_map.get(code) or "").strip()
    if name:
        return name
    detail = work_details.get(code)
    if detail:
        name = (detail.tableName or detail.fullName or "").strip()
    return name or code


def build_categories(
    source: Optional[Mapping[str, Iterable]],
    work_details: Mapping[str, WorkDetail],
    portfolio_map: Mapping[str, str],
) -> List[PortfolioCategory]:
    if not source:
        return []

    normalized = known_codes(work_details, portfolio_map)
    global_seen = set()
    result: List[PortfolioCategory] = []

    for category_name, entries in source.items():
        if not isinstance(entries, list):
            continue

        items: List[PortfolioItem] = []
        for entry in entries:
            raw_code, supplied_name = _entry_code_and_name(entry)
            lookup_key = raw_code.strip().lower()
            if not lookup_key:
                continue
            code = normalized.get(lookup_key, raw_code.strip())
            if code in global_seen:
                logger.debug("Dropping duplicate work %s from category %s", code, category_name)
                continue
            global_seen.add(code)
            name = supplied_name or display_name(code, work_details, portfolio_map)
            detail = work_details.get(code) or create_fallback_detail(name)
            items.append(PortfolioItem(code=code, name=name, category=category_name, detail=detail))

        if items:
            result.append(_with_items_map(category_name, items))

    special = [c for c in result if c.name == SPECIAL_CATEGORY_NAME]
    return [c for c in result if c.name != SPECIAL_CATEGORY_NAME] + special


def _with_items_map(name: str, items: List[PortfolioItem]) -> PortfolioCategory:
    return PortfolioCategory(name=name, items=items, itemsMap={item.code: item for item in items})


def build_portfolio(
    route_categories: Optional[Mapping[str, Iterable]],
    default_categories: Optional[Mapping[str, Iterable]],
    work_details: Mapping[str, WorkDetail],
    portfolio_map: Mapping[str, str],
) -> Portfolio:
    categories = build_categories(route_categories, work_details, portfolio_map)
    if not categories:
        categories = build_categories(default_categories, work_details, portfolio_map)
    if not categories:
        # no categories configured anywhere: list every known work
        codes = sorted(set(portfolio_map) | set(work_details))
        items = []
        for code in codes:
            name = display_name(code, work_details, portfolio_map)
            detail = work_details.get(code) or create_fallback_detail(name)
            items.append(PortfolioItem(code=code, name=name, category=FALLBACK_CATEGORY_NAME, detail=detail))
        categories = [_with_items_map(FALLBACK_CATEGORY_NAME, items)] if items else []
    return Portfolio(categories)
