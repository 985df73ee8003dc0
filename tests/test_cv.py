from datetime import date

from cv import (
    experience_groups,
    normalise_publish_groups,
    normalise_skill_groups,
    publication_rows,
    summary_blocks,
)
from schemas import ExperienceDataset


def test_experience_uses_default_visibility_without_groups(store):
    groups = experience_groups(store.experience(), None, today=date(2024, 6, 1))
    assert [g.type for g in groups] == ["Work", "Education"]
    work = groups[0].items[0]
    assert work.dateRange == "2021/06 – Present"
    assert work.duration == "3y00m"
    education = groups[1].items[0]
    assert education.dateRange == "2019/09 – 2021/06"
    assert education.duration == "1y09m"


def test_experience_filtered_by_groups(store):
    groups = experience_groups(store.experience(), ["studio"])
    assert [g.type for g in groups] == ["Work"]


def test_unknown_types_follow_type_order():
    dataset = ExperienceDataset.model_validate({
        "typeOrder": ["Work"],
        "entries": [
            {"type": "Award", "begin": "2020"},
            {"type": "Work", "begin": "bad"},
        ],
    })
    groups = experience_groups(dataset)
    assert [g.type for g in groups] == ["Work", "Award"]
    assert groups[0].items[0].duration is None


def test_skill_groups_drop_empty_entries():
    groups = normalise_skill_groups([
        {"title": " Tools ", "categories": [
            {"name": "Design", "tools": [{"name": " Figma ", "description": " "}, {"name": ""}]},
            {"name": "Empty", "tools": []},
        ]},
        {"title": "", "categories": []},
    ])
    assert len(groups) == 1
    assert groups[0].title == "Tools"
    assert [c.name for c in groups[0].categories] == ["Design"]
    tool = groups[0].categories[0].tools[0]
    assert tool.name == "Figma"
    assert tool.description is None


def test_publication_rows(store):
    rows = publication_rows(normalise_publish_groups(store.publications()), store.work_details())
    assert len(rows) == 1
    row = rows[0]
    assert row.title == "Talks"
    assert row.tags == ["design"]
    assert row.totalRows == 2
    assert [b.code for b in row.buckets] == ["mc5", None]
    assert row.buckets[0].workName == "Motion Capture"
    assert row.buckets[0].entries[0].text == "Motion and space"


def test_publication_title_falls_back_to_description():
    groups = normalise_publish_groups([
        {"title": "Papers", "items": [{"description": "x" * 150}, {"title": "", "description": ""}]},
    ])
    assert len(groups[0].items) == 1
    assert groups[0].items[0].title == "x" * 100


def test_summary_blocks():
    assert summary_blocks(["  a ", "", ["b", " "], []]) == ["a", ["b"]]
    assert summary_blocks(None) == []
