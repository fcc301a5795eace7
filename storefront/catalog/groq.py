"""Typed GROQ query builder.

Queries are composed from small immutable objects instead of string
templates: conditions (predicates), projections (field selections),
ordering clauses and relevance boosts. Each object can:

- render itself to GROQ text for the Sanity query API, and
- evaluate itself against plain documents, so the in-memory document
  store answers the very same query objects with the same semantics.

Example usage:
    query = Query(
        filter=And(type_is("product"), gt("stock", Literal(0))),
        projection=Projection(Attr("_id"), Attr("name")),
        order=(asc("name"),),
    )
    query.render()
    # '*[_type == "product" && stock > 0] | order(name asc) {_id, name}'
"""

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from storefront.domain.exceptions import QueryParameterError

Document = dict[str, Any]
Dereferencer = Callable[[Any], Document | None]

_WORD = re.compile(r"\w+", re.UNICODE)
_TERM = re.compile(r"[\w*]+", re.UNICODE)


def _no_deref(value: Any) -> Document | None:
    """Dereference by returning inline objects as-is."""
    return value if isinstance(value, dict) and "_ref" not in value else None


@dataclass(frozen=True)
class EvalContext:
    """Parameters and reference resolution for in-memory evaluation."""

    params: Mapping[str, Any]
    deref: Dereferencer = _no_deref


# ============================================================================
# Operands
# ============================================================================


class Operand(ABC):
    """Something that yields a value: a field, a parameter or a literal."""

    @abstractmethod
    def render(self) -> str:
        """Render as GROQ."""

    @abstractmethod
    def evaluate(self, doc: Document, ctx: EvalContext) -> Any:
        """Evaluate against a document."""

    def params(self) -> set[str]:
        """Names of the parameters this operand references."""
        return set()


@dataclass(frozen=True)
class Field(Operand):
    """Attribute path such as ``slug.current`` or ``category->slug.current``.

    ``->`` dereferences the reference found at that point of the path.
    """

    path: str

    def render(self) -> str:
        return self.path

    def evaluate(self, doc: Document, ctx: EvalContext) -> Any:
        value: Any = doc
        for position, segment in enumerate(self.path.split("->")):
            if position > 0:
                value = ctx.deref(value)
            for key in segment.split("."):
                if not key:
                    continue
                if not isinstance(value, dict):
                    return None
                value = value.get(key)
        return value


@dataclass(frozen=True)
class Param(Operand):
    """Query parameter, rendered as ``$name``."""

    name: str

    def render(self) -> str:
        return f"${self.name}"

    def evaluate(self, doc: Document, ctx: EvalContext) -> Any:
        return ctx.params.get(self.name)

    def params(self) -> set[str]:
        return {self.name}


@dataclass(frozen=True)
class Literal(Operand):
    """Constant value, rendered as JSON."""

    value: Any

    def render(self) -> str:
        return json.dumps(self.value, ensure_ascii=False)

    def evaluate(self, doc: Document, ctx: EvalContext) -> Any:
        return self.value


def _as_operand(value: "Operand | str") -> Operand:
    return Field(value) if isinstance(value, str) else value


# ============================================================================
# Conditions
# ============================================================================


class Condition(ABC):
    """Boolean predicate over a document."""

    @abstractmethod
    def render(self) -> str:
        """Render as GROQ."""

    @abstractmethod
    def evaluate(self, doc: Document, ctx: EvalContext) -> bool:
        """Evaluate against a document."""

    @abstractmethod
    def params(self) -> set[str]:
        """Names of the parameters this condition references."""


def _groq_equals(left: Any, right: Any) -> bool:
    # GROQ equality is type-strict: 0 == false is false.
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": _groq_equals,
    "!=": lambda left, right: not _groq_equals(left, right),
    ">": lambda left, right: left > right,
    ">=": lambda left, right: left >= right,
    "<": lambda left, right: left < right,
    "<=": lambda left, right: left <= right,
}


@dataclass(frozen=True)
class Comparison(Condition):
    """Binary comparison, e.g. ``price >= $minPrice``."""

    left: Operand
    operator: str
    right: Operand

    def __post_init__(self) -> None:
        if self.operator not in _COMPARATORS:
            raise ValueError(f"Unsupported operator: {self.operator}")

    def render(self) -> str:
        return f"{self.left.render()} {self.operator} {self.right.render()}"

    def evaluate(self, doc: Document, ctx: EvalContext) -> bool:
        left = self.left.evaluate(doc, ctx)
        right = self.right.evaluate(doc, ctx)
        if self.operator in ("==", "!="):
            return _COMPARATORS[self.operator](left, right)
        # Ordering comparisons involving null, booleans or mixed types are null in GROQ.
        if left is None or right is None or isinstance(left, bool) or isinstance(right, bool):
            return False
        if isinstance(left, str) != isinstance(right, str):
            return False
        return _COMPARATORS[self.operator](left, right)

    def params(self) -> set[str]:
        return self.left.params() | self.right.params()


def text_matches(text: Any, pattern: Any) -> bool:
    """Evaluate GROQ ``text match pattern``.

    Matching is case-insensitive and word based. Every term in the pattern
    must match a word of the text; a term ending in ``*`` matches words
    starting with it. A pattern without terms matches nothing.
    """
    if not isinstance(text, str) or not isinstance(pattern, str):
        return False
    terms = [
        (term.rstrip("*"), term.endswith("*"))
        for term in _TERM.findall(pattern.lower())
        if term.rstrip("*")
    ]
    if not terms:
        return False
    words = _WORD.findall(text.lower())
    for stem, wildcard in terms:
        if wildcard:
            if not any(word.startswith(stem) for word in words):
                return False
        elif stem not in words:
            return False
    return True


@dataclass(frozen=True)
class Match(Condition):
    """Full-text match; ``prefix`` appends the ``*`` wildcard to the pattern."""

    field: Field
    pattern: Operand
    prefix: bool = True

    def render(self) -> str:
        suffix = ' + "*"' if self.prefix else ""
        return f"{self.field.render()} match {self.pattern.render()}{suffix}"

    def evaluate(self, doc: Document, ctx: EvalContext) -> bool:
        pattern = self.pattern.evaluate(doc, ctx)
        if not isinstance(pattern, str):
            return False
        if self.prefix:
            pattern += "*"
        return text_matches(self.field.evaluate(doc, ctx), pattern)

    def params(self) -> set[str]:
        return self.pattern.params()


@dataclass(frozen=True)
class In(Condition):
    """Membership test, e.g. ``_id in $ids``."""

    field: Field
    values: Operand

    def render(self) -> str:
        return f"{self.field.render()} in {self.values.render()}"

    def evaluate(self, doc: Document, ctx: EvalContext) -> bool:
        values = self.values.evaluate(doc, ctx)
        if not isinstance(values, (list, tuple, set, frozenset)):
            return False
        value = self.field.evaluate(doc, ctx)
        return any(_groq_equals(value, candidate) for candidate in values)

    def params(self) -> set[str]:
        return self.values.params()


class _Junction(Condition):
    """Shared rendering for And / Or."""

    joiner = ""

    def __init__(self, *conditions: Condition) -> None:
        if not conditions:
            raise ValueError(f"{type(self).__name__} needs at least one condition")
        self.conditions = tuple(conditions)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.conditions == other.conditions  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.conditions))

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.conditions!r}"

    def render(self) -> str:
        parts = []
        for condition in self.conditions:
            text = condition.render()
            if isinstance(condition, _Junction) and type(condition) is not type(self):
                text = f"({text})"
            parts.append(text)
        return f" {self.joiner} ".join(parts)

    def params(self) -> set[str]:
        names: set[str] = set()
        for condition in self.conditions:
            names |= condition.params()
        return names


class And(_Junction):
    """Conjunction of conditions."""

    joiner = "&&"

    def evaluate(self, doc: Document, ctx: EvalContext) -> bool:
        return all(condition.evaluate(doc, ctx) for condition in self.conditions)


class Or(_Junction):
    """Disjunction of conditions."""

    joiner = "||"

    def evaluate(self, doc: Document, ctx: EvalContext) -> bool:
        return any(condition.evaluate(doc, ctx) for condition in self.conditions)


def eq(left: Operand | str, right: Operand) -> Comparison:
    return Comparison(_as_operand(left), "==", right)


def gt(left: Operand | str, right: Operand) -> Comparison:
    return Comparison(_as_operand(left), ">", right)


def gte(left: Operand | str, right: Operand) -> Comparison:
    return Comparison(_as_operand(left), ">=", right)


def lte(left: Operand | str, right: Operand) -> Comparison:
    return Comparison(_as_operand(left), "<=", right)


def type_is(document_type: str) -> Comparison:
    """``_type == "<document_type>"``."""
    return eq("_type", Literal(document_type))


def unless_empty(param: str, empty: Any, condition: Condition) -> Or:
    """Clause that only applies when ``$param`` differs from its empty value.

    Renders ``($param == <empty> || <condition>)``, so a single query text
    serves every combination of supplied and omitted filters.
    """
    return Or(Comparison(Param(param), "==", Literal(empty)), condition)


# ============================================================================
# Scoring and ordering
# ============================================================================


@dataclass(frozen=True)
class Boost:
    """Weighted scoring term, ``boost(<condition>, <weight>)``."""

    condition: Condition
    weight: float

    def render(self) -> str:
        weight = int(self.weight) if float(self.weight).is_integer() else self.weight
        return f"boost({self.condition.render()}, {weight})"


@dataclass(frozen=True)
class Score:
    """Relevance score pipeline stage; exposes the result as ``_score``."""

    boosts: tuple[Boost, ...]

    def render(self) -> str:
        return f"score({', '.join(boost.render() for boost in self.boosts)})"

    def evaluate(self, doc: Document, ctx: EvalContext) -> float:
        return sum(boost.weight for boost in self.boosts if boost.condition.evaluate(doc, ctx))

    def params(self) -> set[str]:
        names: set[str] = set()
        for boost in self.boosts:
            names |= boost.condition.params()
        return names


@dataclass(frozen=True)
class OrderBy:
    """One ordering key."""

    field: str
    descending: bool = False

    def render(self) -> str:
        return f"{self.field} {'desc' if self.descending else 'asc'}"


def asc(path: str) -> OrderBy:
    return OrderBy(path)


def desc(path: str) -> OrderBy:
    return OrderBy(path, descending=True)


def sort_documents(
    documents: Iterable[Document],
    order: Iterable[OrderBy],
    ctx: EvalContext,
) -> list[Document]:
    """Stable multi-key sort. Documents missing a key go last for that key."""
    result = list(documents)
    for clause in reversed(list(order)):
        path = Field(clause.field)
        present = [doc for doc in result if path.evaluate(doc, ctx) is not None]
        missing = [doc for doc in result if path.evaluate(doc, ctx) is None]
        present.sort(key=lambda doc: path.evaluate(doc, ctx), reverse=clause.descending)
        result = present + missing
    return result


# ============================================================================
# Projections
# ============================================================================


class Selection(ABC):
    """One entry of a projection."""

    key: str

    @abstractmethod
    def render(self) -> str:
        """Render as GROQ."""

    @abstractmethod
    def apply(self, doc: Document, ctx: EvalContext) -> Any:
        """Compute the projected value."""


@dataclass(frozen=True)
class Attr(Selection):
    """Plain attribute, kept under its own name."""

    key: str

    def render(self) -> str:
        return self.key

    def apply(self, doc: Document, ctx: EvalContext) -> Any:
        return doc.get(self.key)


@dataclass(frozen=True)
class Alias(Selection):
    """Renamed path, ``"key": source``."""

    key: str
    source: str

    def render(self) -> str:
        return f'"{self.key}": {self.source}'

    def apply(self, doc: Document, ctx: EvalContext) -> Any:
        return Field(self.source).evaluate(doc, ctx)


@dataclass(frozen=True)
class Deref(Selection):
    """Followed reference with a sub-projection, ``key->{...}``."""

    key: str
    projection: "Projection"

    def render(self) -> str:
        return f"{self.key}->{self.projection.render()}"

    def apply(self, doc: Document, ctx: EvalContext) -> Any:
        target = ctx.deref(doc.get(self.key))
        if target is None:
            return None
        return self.projection.apply(target, ctx)


@dataclass(frozen=True)
class ArrayMap(Selection):
    """Projected array, optionally sliced: ``"key": source[0...4]{...}``.

    ``stop`` is exclusive, like GROQ's ``...`` range.
    """

    key: str
    source: str
    projection: "Projection"
    start: int | None = None
    stop: int | None = None

    def render(self) -> str:
        if self.start is None and self.stop is None:
            brackets = "[]"
        else:
            brackets = f"[{self.start or 0}...{self.stop}]"
        return f'"{self.key}": {self.source}{brackets}{self.projection.render()}'

    def apply(self, doc: Document, ctx: EvalContext) -> Any:
        items = Field(self.source).evaluate(doc, ctx)
        if not isinstance(items, list):
            return None
        return [
            self.projection.apply(item, ctx)
            for item in items[self.start : self.stop]
            if isinstance(item, dict)
        ]


@dataclass(frozen=True)
class ArrayElement(Selection):
    """Single array element with a sub-projection: ``"key": source[0]{...}``."""

    key: str
    source: str
    index: int
    projection: "Projection"

    def render(self) -> str:
        return f'"{self.key}": {self.source}[{self.index}]{self.projection.render()}'

    def apply(self, doc: Document, ctx: EvalContext) -> Any:
        items = Field(self.source).evaluate(doc, ctx)
        if not isinstance(items, list):
            return None
        try:
            item = items[self.index]
        except IndexError:
            return None
        return self.projection.apply(item, ctx) if isinstance(item, dict) else None


class Projection:
    """Ordered set of selections, rendered as ``{a, b, "c": d}``."""

    def __init__(self, *selections: Selection) -> None:
        self.selections = tuple(selections)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Projection) and self.selections == other.selections

    def __hash__(self) -> int:
        return hash(self.selections)

    def __repr__(self) -> str:
        return f"Projection{self.selections!r}"

    @property
    def keys(self) -> list[str]:
        return [selection.key for selection in self.selections]

    def extend(self, *selections: Selection) -> "Projection":
        """Return a projection with extra selections appended."""
        return Projection(*self.selections, *selections)

    def render(self) -> str:
        return "{" + ", ".join(selection.render() for selection in self.selections) + "}"

    def apply(self, doc: Document, ctx: EvalContext) -> Document:
        return {selection.key: selection.apply(doc, ctx) for selection in self.selections}


# ============================================================================
# Query
# ============================================================================


@dataclass(frozen=True)
class Query:
    """A complete read query: predicate, scoring, ordering, slice, projection.

    Attributes:
        filter: Predicate documents must satisfy.
        projection: Shape of each returned record.
        order: Ordering keys, applied after scoring.
        score: Optional relevance scoring stage.
        limit: Optional ``(start, stop)`` range, stop exclusive.
        single: Return the first match (or None) instead of a list.
    """

    filter: Condition
    projection: Projection
    order: tuple[OrderBy, ...] = ()
    score: Score | None = None
    limit: tuple[int, int] | None = None
    single: bool = False

    def ordered(self, *clauses: OrderBy) -> "Query":
        return replace(self, order=tuple(clauses))

    def sliced(self, start: int, stop: int) -> "Query":
        return replace(self, limit=(start, stop), single=False)

    def first(self) -> "Query":
        return replace(self, single=True, limit=None)

    def parameters(self) -> set[str]:
        """Names of every parameter the query references."""
        names = self.filter.params()
        if self.score is not None:
            names |= self.score.params()
        return names

    def bind(self, params: Mapping[str, Any] | None) -> dict[str, Any]:
        """Check that every referenced parameter is supplied.

        Raises:
            QueryParameterError: If a referenced parameter is missing.
        """
        bound = dict(params or {})
        missing = sorted(self.parameters() - bound.keys())
        if missing:
            raise QueryParameterError(missing)
        return bound

    def render(self) -> str:
        text = f"*[{self.filter.render()}]"
        if self.score is not None:
            text += f" | {self.score.render()}"
        if self.order:
            text += f" | order({', '.join(clause.render() for clause in self.order)})"
        if self.single:
            text += "[0]"
        elif self.limit is not None:
            text += f"[{self.limit[0]}...{self.limit[1]}]"
        return f"{text} {self.projection.render()}"

    def evaluate(
        self,
        documents: Iterable[Document],
        params: Mapping[str, Any],
        deref: Dereferencer = _no_deref,
    ) -> list[Document] | Document | None:
        """Answer the query against in-memory documents."""
        ctx = EvalContext(params=params, deref=deref)
        matched = [doc for doc in documents if self.filter.evaluate(doc, ctx)]
        if self.score is not None:
            matched = [{**doc, "_score": self.score.evaluate(doc, ctx)} for doc in matched]
        matched = sort_documents(matched, self.order, ctx)

        if self.single:
            return self.projection.apply(matched[0], ctx) if matched else None
        if self.limit is not None:
            matched = matched[self.limit[0] : self.limit[1]]
        return [self.projection.apply(doc, ctx) for doc in matched]

    def __str__(self) -> str:
        return self.render()
