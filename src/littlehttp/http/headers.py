"""
=============================================================================
HEADER FIELD STORE
=============================================================================

Holds the header block of one request as an ordered sequence of
name/value pairs.

=============================================================================
ORDERING: LAST DECLARED, FIRST FOUND
=============================================================================

Fields are PREPENDED as they are parsed, so iteration runs from the last
header line back to the first:

    Request header block         Store (iteration order)
    ─────────────────────        ───────────────────────
    Host: a.example              X-Tag: two
    X-Tag: one           ──►     X-Tag: one
    X-Tag: two                   Host: a.example

lookup() returns the first match in that order, so for a repeated header
the LAST declared value wins:

    lookup(headers, "x-tag")  →  "two"

Unlike a dict keyed on lowercase names, nothing is merged or dropped:
duplicates stay visible through get_all().

=============================================================================
CASE INSENSITIVITY
=============================================================================

Header names are case-insensitive (RFC 7230 §3.2), so "Content-Length",
"content-length" and "content-LENGTH" all name the same field. Names are
stored as sent and compared case-folded.

=============================================================================
"""

from collections import deque
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class HeaderField:
    """One "Name: value" line of the header block."""

    name: str
    value: str

    def matches(self, name: str) -> bool:
        """Case-insensitive comparison against a header name."""
        return self.name.casefold() == name.casefold()


class HeaderFields:
    """
    Ordered, duplicate-preserving header sequence.

    Only the parser adds fields (via prepend); everything else reads.
    Fields passed to the constructor are taken in arrival order and
    prepended one by one, exactly as the parser would.
    """

    def __init__(self, fields=()):
        self._fields: deque[HeaderField] = deque()
        for f in fields:
            self.prepend(f)

    def prepend(self, field: HeaderField) -> None:
        """Insert a field in front of every field parsed before it."""
        self._fields.appendleft(field)

    def lookup(self, name: str) -> Optional[str]:
        """Value of the first field named `name`, or None."""
        for f in self._fields:
            if f.matches(name):
                return f.value
        return None

    def get_all(self, name: str) -> list[str]:
        """Every value for `name`, in storage order."""
        return [f.value for f in self._fields if f.matches(name)]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __iter__(self) -> Iterator[HeaderField]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{f.name}={f.value!r}" for f in self._fields)
        return f"HeaderFields({pairs})"


def lookup(headers: HeaderFields, name: str) -> Optional[str]:
    """Case-insensitive first-match lookup; see HeaderFields.lookup."""
    return headers.lookup(name)
