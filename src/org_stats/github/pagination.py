"""Link header parsing and page count inference."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlsplit

_ENTRY_RE = re.compile(r"<([^>]*)>([^<]*)")
_REL_RE = re.compile(r'rel\s*=\s*"?([^";,]+)"?')


def parse_link_header(header: str | None) -> dict[str, str]:
    """Parse a ``Link`` header into a mapping of relation name to URL.

    Entries look like ``<https://api.github.com/...?page=2>; rel="next"``.
    Entries are delimited by their ``<url>`` so commas inside a URL are
    kept. Entries without a ``rel`` parameter are skipped.
    """
    links: dict[str, str] = {}
    if not header:
        return links

    for entry in _ENTRY_RE.finditer(header):
        url, params = entry.groups()
        for param in params.split(";"):
            match = _REL_RE.match(param.strip())
            if match:
                # rel may carry several space-separated names
                for rel in match.group(1).split():
                    links[rel] = url
    return links


def page_number(url: str) -> int | None:
    """Return the ``page`` query parameter of *url*, if it is an integer."""
    values = parse_qs(urlsplit(url).query).get("page")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


def resolve_page_count(header: str | None) -> int:
    """Total page count encoded by the ``last`` relation, or 0 when unknown.

    0 means there is no ``last`` relation (a single page, or metadata
    that does not say); it is not the same as one page of zero items.
    """
    last = parse_link_header(header).get("last")
    if last is None:
        return 0
    return page_number(last) or 0
