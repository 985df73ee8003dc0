import re
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence

from cvdates import compute_duration, format_range
from schemas import (
    ExperienceDataset,
    ExperienceGroup,
    ExperienceRow,
    PublicationGroup,
    PublicationItem,
    PublishBucketRow,
    PublishCategoryRow,
    PublishEntryRow,
    SkillCategory,
    SkillGroup,
    SkillTool,
    WorkDetail,
)


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


# ==========
# Experience
# ==========

def is_visible(entry, groups: Optional[Sequence[str]]) -> bool:
    if not groups:
        return entry.showDefault
    return any(group in groups for group in entry.showGroups)


def experience_groups(
    dataset: ExperienceDataset,
    groups: Optional[Sequence[str]] = None,
    today: Optional[date] = None,
) -> List[ExperienceGroup]:
    """Visible entries grouped by type, in ``typeOrder`` first."""
    buckets: Dict[str, List[ExperienceRow]] = {}
    for entry in dataset.entries:
        if not is_visible(entry, groups):
            continue
        row = ExperienceRow(
            entry=entry,
            dateRange=format_range(entry.begin, entry.end),
            duration=compute_duration(entry.begin, entry.end, today=today),
        )
        buckets.setdefault(entry.type, []).append(row)

    ordered = [t for t in dataset.typeOrder if t in buckets]
    ordered += [t for t in buckets if t not in ordered]
    return [ExperienceGroup(type=t, items=buckets[t]) for t in ordered]


def summary_blocks(cv_summary) -> list:
    blocks = []
    for block in cv_summary or []:
        if isinstance(block, list):
            items = [_clean(item) for item in block if _clean(item)]
            if items:
                blocks.append(items)
        elif _clean(block):
            blocks.append(_clean(block))
    return blocks


# ======
# Skills
# ======

def normalise_skill_groups(raw_groups) -> List[SkillGroup]:
    result = []
    for group in raw_groups if isinstance(raw_groups, list) else []:
        if not isinstance(group, dict) or not _clean(group.get("title")):
            continue
        categories = []
        for category in group.get("categories") or []:
            if not isinstance(category, dict) or not _clean(category.get("name")):
                continue
            tools = [
                SkillTool(
                    name=_clean(tool.get("name")),
                    description=_clean(tool.get("description")) or None,
                    image=_clean(tool.get("image")) or None,
                )
                for tool in category.get("tools") or []
                if isinstance(tool, dict) and _clean(tool.get("name"))
            ]
            if tools:
                categories.append(SkillCategory(name=_clean(category["name"]), tools=tools))
        if categories:
            result.append(SkillGroup(title=_clean(group["title"]), categories=categories))
    return result


# ============
# Publications
# ============

def normalise_publish_groups(raw_groups) -> List[PublicationGroup]:
    result = []
    for group in raw_groups if isinstance(raw_groups, list) else []:
        if not isinstance(group, dict) or not _clean(group.get("title")):
            continue
        items = []
        for item in group.get("items") or []:
            if not isinstance(item, dict):
                continue
            title = _clean(item.get("title"))
            description = _clean(item.get("description"))
            if not title and not description:
                continue
            related = [code for code in item.get("relatedWorks") or [] if _clean(code)]
            items.append(PublicationItem(
                title=title or description[:100],
                type=_clean(item.get("type")),
                description=description,
                link=_clean(item.get("link")) or None,
                relatedWorks=related,
            ))
        if items:
            result.append(PublicationGroup(title=_clean(group["title"]), items=items))
    return result


def publication_rows(
    groups: List[PublicationGroup],
    work_details: Mapping[str, WorkDetail],
) -> List[PublishCategoryRow]:
    """Table rows for the publication section.

    A group title ``"Talks # design # research"`` becomes title ``Talks``
    with tags ``design`` and ``research``. Items are bucketed by their first
    related work.
    """
    rows = []
    for group in groups:
        normalized_title = re.sub(r"\s+", " ", group.title.strip())
        main_title, *tag_parts = re.split(r"\s*#\s*", normalized_title)
        tags = [tag.strip() for tag in tag_parts if tag.strip()]

        buckets: List[PublishBucketRow] = []
        for item in group.items:
            text = item.description or item.title
            if not text:
                continue
            related = next((code for code in item.relatedWorks if _clean(code)), None)
            code = related.strip().lower() if related else None
            bucket = next((b for b in buckets if b.code == code), None)
            if bucket is None:
                detail = work_details.get(code) if code else None
                work_name = None
                if code:
                    work_name = (detail.tableName or detail.fullName) if detail else None
                    work_name = work_name or code.upper()
                bucket = PublishBucketRow(code=code, workName=work_name, entries=[])
                buckets.append(bucket)
            bucket.entries.append(PublishEntryRow(text=text, type=item.type, link=item.link))

        total = sum(len(b.entries) for b in buckets)
        if total:
            rows.append(PublishCategoryRow(
                title=main_title.strip() or "—",
                tags=tags,
                totalRows=total,
                buckets=buckets,
            ))
    return rows
