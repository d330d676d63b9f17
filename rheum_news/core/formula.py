"""Airtable ``filterByFormula`` construction.

Conditions are built as a tiny expression tree and rendered to formula text.
Every string literal goes through :func:`quote`, which escapes all characters
that are significant inside an Airtable string literal, so caller-supplied
values can never terminate the literal early or inject formula syntax.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union


# Airtable column names used in filters
CATEGORY = "Category"
SOURCE = "Source"
PRIORITY = "Priority"
TITLE = "Title"
SUMMARY = "Summary"
KEYWORDS = "Keywords"
USER_SAVED = "User Saved"

SEARCH_FIELDS = (TITLE, SUMMARY, KEYWORDS)

_ESCAPES = str.maketrans({
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
})


def quote(value: str) -> str:
    return "'" + value.translate(_ESCAPES) + "'"


def field_ref(name: str) -> str:
    if not name or "}" in name or "{" in name:
        raise ValueError(f"Unsupported Airtable field name: {name!r}")
    return "{" + name + "}"


@dataclass(frozen=True)
class Eq:
    field: str
    value: str

    def render(self) -> str:
        return f"{field_ref(self.field)} = {quote(self.value)}"


@dataclass(frozen=True)
class ContainsInsensitive:
    field: str
    term: str

    def render(self) -> str:
        return f"FIND(LOWER({quote(self.term)}), LOWER({field_ref(self.field)}))"


@dataclass(frozen=True)
class IsTrue:
    field: str

    def render(self) -> str:
        return f"{field_ref(self.field)} = TRUE()"


@dataclass(frozen=True)
class AnyOf:
    conditions: Sequence["Condition"]

    def render(self) -> str:
        return "OR(" + ", ".join(c.render() for c in self.conditions) + ")"


@dataclass(frozen=True)
class AllOf:
    conditions: Sequence["Condition"]

    def render(self) -> str:
        return "AND(" + ", ".join(c.render() for c in self.conditions) + ")"


Condition = Union[Eq, ContainsInsensitive, IsTrue, AnyOf, AllOf]


@dataclass
class FilterRequest:
    category: Optional[str] = None
    source: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None

    def conditions(self) -> List[Condition]:
        # Order is part of the contract: category, source, priority, search
        out: List[Condition] = []
        if self.category:
            out.append(Eq(CATEGORY, self.category))
        if self.source:
            out.append(Eq(SOURCE, self.source))
        if self.priority:
            out.append(Eq(PRIORITY, self.priority))
        if self.search:
            out.append(AnyOf([ContainsInsensitive(f, self.search) for f in SEARCH_FIELDS]))
        return out

    def as_dict(self) -> dict:
        return {
            "category": self.category,
            "source": self.source,
            "priority": self.priority,
            "search": self.search,
        }


def combine(conditions: Sequence[Condition]) -> str:
    if not conditions:
        return ""
    if len(conditions) == 1:
        return conditions[0].render()
    return AllOf(list(conditions)).render()


def build_filter(request: FilterRequest) -> str:
    """Return the formula for ``request``; empty string means match everything."""
    return combine(request.conditions())


def saved_only() -> str:
    return IsTrue(USER_SAVED).render()
