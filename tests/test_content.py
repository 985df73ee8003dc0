import os

from catalog import FALLBACK_CATEGORY_NAME, SPECIAL_CATEGORY_NAME
from content import DEFAULT_BLOBS, DEFAULT_FOOTER_CONTENT, display_title, pick_text, year_range_text
from schemas import PortfolioItem, WorkDetail


def test_unknown_route_equals_default(store):
    assert store.resolve("no-such-route").model_dump() == store.resolve("default").model_dump()


def test_resolve_is_idempotent(store):
    assert store.resolve("studio").model_dump() == store.resolve("studio").model_dump()


def test_default_profile(store):
    profile = store.resolve("default")
    assert profile.lang == "zh"
    assert profile.siteTitle == "作品集"
    assert [c.name for c in profile.categories] == ["互動設計", SPECIAL_CATEGORY_NAME]
    assert profile.homeContent.intro == ["Hello!", "Replace this text with your own introduction."]
    assert profile.homeContent.blobs == DEFAULT_BLOBS
    assert profile.footerContent.message == DEFAULT_FOOTER_CONTENT.message
    assert profile.cvSettings.groups == ["design"]
    assert profile.cvSummary[1] == ["User research", "Data visualization"]


def test_route_profile_inherits_from_default(store):
    profile = store.resolve("STUDIO")
    assert profile.lang == "en"
    assert profile.siteTitle == "Studio Portfolio"
    assert profile.sidebarTitle == "YOUR NAME"
    assert [c.name for c in profile.categories] == ["Interaction", "Research"]
    assert [i.code for i in profile.portfolioItems] == ["mc5", "viz2", "ux3"]
    assert profile.cvSettings.downloadUrl.endswith("cv.pdf")
    assert profile.cvSettings.groups == ["studio"]
    assert profile.cvSettings.link is None
    assert profile.homeContent.badge == "Portfolio"


def test_cv_groups_are_trimmed_and_deduplicated(store, write_json):
    write_json("portfolioRoutes.json", {
        "default": {"cv": "base.pdf"},
        "x": {"cv": {"showTypes": [" a ", "a", "", None, "b"], "link": " https://cv "}},
    })
    settings = store.resolve("x").cvSettings
    assert settings.groups == ["a", "b"]
    assert settings.link == "https://cv"
    assert settings.downloadUrl.endswith("base.pdf")


def test_malformed_routes_file_degrades(store, data_dir):
    (data_dir / "portfolioRoutes.json").write_text("{not json", encoding="utf-8")
    profile = store.resolve("default")
    assert profile.siteTitle == "Portfolio"
    assert profile.sidebarTitle == "YOUR NAME"
    assert [c.name for c in profile.categories] == [FALLBACK_CATEGORY_NAME]
    assert profile.portfolioItems[0].code == "mc1"


def test_saved_changes_are_picked_up(store, data_dir, write_json):
    assert store.resolve("default").siteTitle == "作品集"
    write_json("portfolioRoutes.json", {"default": {"siteTitle": "New title"}})
    path = data_dir / "portfolioRoutes.json"
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 10_000_000))
    assert store.resolve("default").siteTitle == "New title"


def test_home_blob_priority(store, write_json):
    route_blob = {"id": "r", "label": "Route", "x": "1%", "y": "1%"}
    home_blob = {"id": "h", "label": "Home", "x": "2%", "y": "2%"}
    write_json("portfolioRoutes.json", {
        "default": {},
        "a": {"blobs": [route_blob]},
        "b": {"blobs": [route_blob], "home": {"blobs": [home_blob]}},
    })
    assert [b.id for b in store.resolve("a").homeContent.blobs] == ["r"]
    assert [b.id for b in store.resolve("b").homeContent.blobs] == ["h"]


def test_pick_text():
    assert pick_text("en", "中文", "English") == "English"
    assert pick_text("en", "中文", "  ") == "中文"
    assert pick_text("zh", "中文", "English") == "中文"
    assert pick_text("en", None, None) == ""


def test_display_title_and_year_range():
    item = PortfolioItem(code="mc5", name="MC", category="A",
                         detail=WorkDetail(tableName="動作", tableNameEn="Motion", yearBegin="2021", yearEnd="2022"))
    assert display_title(item, "en") == "Motion"
    assert display_title(item, "zh") == "動作"
    assert year_range_text(item.detail) == "2021 – 2022"
    assert year_range_text(WorkDetail(yearBegin="2021", yearEnd="2021")) == "2021"
    assert year_range_text(WorkDetail()) == ""


def test_english_route_titles_fall_back_to_default(store, write_json):
    write_json("portfolioRoutes.json", {
        "default": {"siteTitle": "作品集", "siteTitleEn": "Works", "sidebarTitle": "名字"},
        "en": {"lang": "en", "sidebarTitle": "  ", "sidebarTitleEn": "Name"},
        "zh": {"lang": "zh", "siteTitleEn": "Ignored"},
    })
    english = store.resolve("en")
    assert english.siteTitle == "Works"
    assert english.sidebarTitle == "Name"
    chinese = store.resolve("zh")
    assert chinese.siteTitle == "作品集"
    assert chinese.sidebarTitle == "名字"
