"""Identifier derivation for generated code.

Every stage that manufactures a name (endpoint functions, record classes,
record attributes, method parameters) goes through these helpers so that the
same raw input always yields the same identifier.
"""

import keyword
import re

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

FALLBACK_NAME = "X"

# Parameter names that would shadow the generated method's own arguments.
RESERVED_PARAMS = frozenset({"self", "body"})


def normalize(raw: str) -> str:
    """Convert an API-supplied name into a PascalCase identifier.

    Short all-uppercase segments (ID, URL, UI) are kept verbatim.
    """
    parts = []
    for segment in _NON_ALNUM.split(raw):
        if not segment:
            continue
        if len(segment) <= 3 and segment.upper() == segment:
            parts.append(segment)
        else:
            parts.append(segment[0].upper() + segment[1:])
    return "".join(parts) or FALLBACK_NAME


def snake_case(name: str) -> str:
    """Render a PascalCase identifier in snake_case.

    >>> snake_case("PlayerID")
    'player_id'
    """
    return _WORD_BOUNDARY.sub("_", name).lower()


def parameter_name(raw: str) -> str:
    """Derive a method parameter name from a schema parameter name."""
    name = snake_case(normalize(raw))
    if name[0].isdigit():
        name = "n" + name
    if keyword.iskeyword(name) or name in RESERVED_PARAMS:
        name += "_param"
    return name


def safe_identifier(name: str, reserved: frozenset[str] = frozenset()) -> str:
    """Append an underscore when ``name`` is a keyword or otherwise taken."""
    if keyword.iskeyword(name) or name in reserved:
        return name + "_"
    return name


class NameRegistry:
    """Hands out unique names within one scope (a record, a signature).

    The first occurrence of a name is returned as is; later ones get a numeric
    suffix starting at the count of prior occurrences plus one.
    """

    def __init__(self):
        self._counts: dict[str, int] = {}
        self._taken: set[str] = set()

    def claim(self, name: str) -> str:
        count = self._counts.get(name, 0)
        candidate = name
        while candidate in self._taken:
            count += 1
            candidate = f"{name}{count}"
        self._counts[name] = max(count, 1)
        self._taken.add(candidate)
        return candidate

    def __contains__(self, name: str) -> bool:
        return name in self._taken
