import re
from typing import List, NamedTuple, Optional

DEFAULT_ROUTE = "default"


class RouteInfo(NamedTuple):
    route_key: str
    work_code: Optional[str]


def _segments(value: str) -> List[str]:
    value = re.sub(r"^#?/?", "", value or "")
    return [seg for seg in value.strip("/").split("/") if seg]


def resolve_route(hash: str = "", path: str = "", base_path: str = "") -> RouteInfo:
    """Map a URL hash/path onto ``(route_key, work_code)``.

    ``#/studio/mc5`` and ``/studio/mc5`` both give ``("studio", "mc5")``.
    The hash wins when it carries any segment. Segments are lowercased;
    the route key is not checked against the route table.
    """
    segments = _segments((hash or "").lstrip("#"))
    if not segments:
        if base_path and path.startswith(base_path):
            path = path[len(base_path):]
        segments = _segments(path)

    route_key = segments[0].lower() if segments else DEFAULT_ROUTE
    work_code = segments[1].lower() if len(segments) > 1 else None
    return RouteInfo(route_key, work_code)
