from catalog import (
    FALLBACK_CATEGORY_NAME,
    SPECIAL_CATEGORY_NAME,
    build_categories,
    build_portfolio,
)
from schemas import WorkDetail

DETAILS = {
    "mc5": WorkDetail(fullName="Motion Capture Study", tableName="Motion Capture"),
    "viz2": WorkDetail(fullName="Air Quality Dashboard"),
    "ux3": WorkDetail(tableName="Onboarding Research"),
}
PORTFOLIO_MAP = {"mc5": "Motion Capture", "viz2": "Air Quality Dashboard", "ux3": "Onboarding Research"}


def test_codes_resolve_case_insensitively():
    categories = build_categories({"A": ["MC5", " viz2 "]}, DETAILS, PORTFOLIO_MAP)
    assert [item.code for item in categories[0].items] == ["mc5", "viz2"]
    assert categories[0].items[0].name == "Motion Capture"
    assert categories[0].items[0].detail is DETAILS["mc5"]


def test_first_assignment_wins():
    categories = build_categories({"A": ["mc5"], "B": ["mc5", "ux3"], "C": ["viz2", "VIZ2"]}, DETAILS, PORTFOLIO_MAP)
    assert [[i.code for i in c.items] for c in categories] == [["mc5"], ["ux3"], ["viz2"]]


def test_missing_detail_gets_placeholder():
    categories = build_categories({"A": [{"code": "zz9", "name": "Mystery"}]}, DETAILS, PORTFOLIO_MAP)
    item = categories[0].items[0]
    assert item.code == "zz9"
    assert item.name == "Mystery"
    assert item.detail.content == ""
    assert item.detail.intro is None
    assert item.detail.tags == []


def test_unknown_code_without_name_uses_code():
    categories = build_categories({"A": ["zz9"]}, {}, {})
    assert categories[0].items[0].name == "zz9"


def test_special_category_sorts_last_and_empty_categories_are_dropped():
    source = {SPECIAL_CATEGORY_NAME: ["ux3"], "Empty": [], "A": ["mc5"], "Broken": "mc5"}
    categories = build_categories(source, DETAILS, PORTFOLIO_MAP)
    assert [c.name for c in categories] == ["A", SPECIAL_CATEGORY_NAME]


def test_items_map():
    category = build_categories({"A": ["mc5", "viz2"]}, DETAILS, PORTFOLIO_MAP)[0]
    assert set(category.itemsMap) == {"mc5", "viz2"}
    assert category.itemsMap["viz2"].category == "A"


def test_portfolio_falls_back_to_default_then_all_works():
    portfolio = build_portfolio(None, {"D": ["ux3"]}, DETAILS, PORTFOLIO_MAP)
    assert portfolio.codes == ["ux3"]

    portfolio = build_portfolio({}, None, DETAILS, PORTFOLIO_MAP)
    assert [c.name for c in portfolio.categories] == [FALLBACK_CATEGORY_NAME]
    assert portfolio.codes == ["mc5", "ux3", "viz2"]


def test_portfolio_lookup():
    portfolio = build_portfolio({"A": ["mc5"], "B": ["ux3"]}, None, DETAILS, PORTFOLIO_MAP)
    assert portfolio.find("MC5").code == "mc5"
    assert portfolio.find("nope") is None
    assert portfolio.category_of("ux3") == "B"
    assert portfolio.category_of("nope") is None
