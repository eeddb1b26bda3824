"""Link header parsing for cursor-style pagination.

Link Header Format:
    Link: <url>; rel="prev", <url>; rel="next", <url>; rel="first", <url>; rel="last"

Each entry is `( "," )? "<" URL ">;" "rel=" QUOTE NAME QUOTE`, with
whitespace allowed around every token. The whole header has to be made of
such entries; anything else is a ParseError.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from rest_harness.exceptions import ParseError

# Matches one entry, anchored at the current position: <url>; rel="relation"
LINK_ENTRY_PATTERN = re.compile(r'\s*,?\s*<(?P<url>[^<>]*)>;\s*rel=\s*"(?P<rel>[^"]*)"\s*')

KNOWN_RELATIONS = frozenset({"prev", "next", "first", "last"})


def parse_link_header(value: str) -> dict[str, str]:
    """Parse a Link header into a mapping of relation name to URL.

    Later entries with the same relation overwrite earlier ones. Relation
    names are not checked here; see Link.from_header for that.

    Args:
        value: The raw header value.

    Returns:
        Mapping of relation name to URL string.

    Raises:
        ParseError: If the value is not one or more well-formed entries.

    Example:
        >>> parse_link_header('<https://h/x?page=2>; rel="next"')
        {'next': 'https://h/x?page=2'}

    """
    relations: dict[str, str] = {}
    pos = 0

    while pos < len(value):
        match = LINK_ENTRY_PATTERN.match(value, pos)
        if match is None:
            raise ParseError(f"Malformed Link header at offset {pos}: {value!r}", raw=value)
        relations[match.group("rel")] = match.group("url").strip()
        pos = match.end()

    if not relations:
        raise ParseError(f"Link header has no entries: {value!r}", raw=value)

    return relations


@dataclass(frozen=True)
class Link:
    """Pagination relations parsed from one response's Link header.

    Attributes:
        prev: URL of the previous page.
        next: URL of the next page.
        first: URL of the first page.
        last: URL of the last page.

    """

    prev: str | None = None
    next: str | None = None
    first: str | None = None
    last: str | None = None

    @classmethod
    def from_header(cls, value: str) -> Link:
        """Build a Link from a raw header value, ignoring unknown relations.

        Raises:
            ParseError: If the header is malformed.

        """
        relations = parse_link_header(value)
        return cls(**{rel: url for rel, url in relations.items() if rel in KNOWN_RELATIONS})

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.next is not None

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.prev is not None


def link_from_headers(headers: Mapping[str, str]) -> Link | None:
    """Extract pagination links from response headers.

    A missing or blank Link header means "no link info" and returns None.

    Raises:
        ParseError: If a Link header is present but malformed.

    """
    value = headers.get("Link")
    if value is None or not value.strip():
        return None
    return Link.from_header(value)
