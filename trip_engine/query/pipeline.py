"""Generic filter -> sort -> group evaluator used by every listing surface.

The pipeline knows nothing about trips, activities or posts. Callers describe
their items with a QuerySchema (field name -> accessor) and the user's
selections with a QuerySpec.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

from trip_engine.config import get_settings
from trip_engine.errors import UnknownQueryField

T = TypeVar("T")


class SortDirection(str, Enum):
    """Sort direction."""

    asc = "asc"
    desc = "desc"


class GroupOrder(str, Enum):
    """Order of groups in a grouped result."""

    first_seen = "first_seen"
    alphabetical = "alphabetical"


class Predicate(Protocol):
    """Single-field filter condition."""

    def matches(self, value: Any) -> bool: ...


@dataclass(frozen=True)
class Equals:
    """Exact match."""

    value: Any

    def matches(self, value: Any) -> bool:
        return value is not None and value == self.value


@dataclass(frozen=True)
class OneOf:
    """Value is one of the given options."""

    values: tuple[Any, ...]

    def matches(self, value: Any) -> bool:
        return value is not None and value in self.values


@dataclass(frozen=True)
class Contains:
    """Collection-valued field contains the given member."""

    member: Any

    def matches(self, value: Any) -> bool:
        if value is None:
            return False
        return self.member in value


@dataclass(frozen=True)
class Range:
    """Inclusive range; either bound may be omitted."""

    min: Any = None
    max: Any = None

    def matches(self, value: Any) -> bool:
        if value is None:
            return False
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


def at_least(minimum: Any) -> Range:
    return Range(min=minimum)


def at_most(maximum: Any) -> Range:
    return Range(max=maximum)


@dataclass(frozen=True)
class SortKey:
    """Field to sort by and direction."""

    field: str
    direction: SortDirection = SortDirection.asc


@dataclass(frozen=True)
class GroupKey:
    """Field to group by; order None falls back to the configured default."""

    field: str
    order: GroupOrder | None = None


@dataclass
class QuerySpec:
    """Declarative description of one listing request (never persisted)."""

    search_text: str | None = None
    filters: Mapping[str, Predicate] = field(default_factory=dict)
    sort: SortKey | None = None
    group: GroupKey | None = None

    @property
    def normalized_search(self) -> str | None:
        """Casefolded search text, or None when the search box is blank."""
        if self.search_text is None:
            return None
        text = self.search_text.strip()
        return text.casefold() if text else None


@dataclass(frozen=True)
class QuerySchema(Generic[T]):
    """Field accessors for one kind of item.

    Attributes:
        fields: Field name -> accessor returning that field's value
        search_fields: Fields matched by free-text search
    """

    fields: Mapping[str, Callable[[T], Any]]
    search_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in self.search_fields:
            self.accessor(name)

    def accessor(self, name: str) -> Callable[[T], Any]:
        """Look up an accessor, raising UnknownQueryField for unknown names."""
        try:
            return self.fields[name]
        except KeyError:
            raise UnknownQueryField(name, sorted(self.fields)) from None


def _text_matches(value: Any, needle: str) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return needle in value.casefold()
    if isinstance(value, list | tuple | set | frozenset):
        return any(_text_matches(v, needle) for v in value)
    return needle in str(value).casefold()


def _sort_value(value: Any) -> Any:
    # Text sorts case-insensitively
    if isinstance(value, str):
        return value.casefold()
    return value


def filter_items(items: list[T], spec: QuerySpec, schema: QuerySchema[T]) -> list[T]:
    """Apply search text (OR across search fields) AND every predicate."""
    needle = spec.normalized_search
    search_accessors = [schema.accessor(name) for name in schema.search_fields]
    predicates = [(schema.accessor(name), pred) for name, pred in spec.filters.items()]

    if needle is None and not predicates:
        return list(items)

    result: list[T] = []
    for item in items:
        if needle is not None and not any(
            _text_matches(get(item), needle) for get in search_accessors
        ):
            continue
        if all(pred.matches(get(item)) for get, pred in predicates):
            result.append(item)
    return result


def sort_items(items: list[T], sort: SortKey | None, schema: QuerySchema[T]) -> list[T]:
    """Stable sort; items whose key is None go last in either direction."""
    if sort is None:
        return list(items)

    get = schema.accessor(sort.field)
    keyed = [(get(item), item) for item in items]
    present = [pair for pair in keyed if pair[0] is not None]
    missing = [item for value, item in keyed if value is None]

    present.sort(
        key=lambda pair: _sort_value(pair[0]),
        reverse=sort.direction == SortDirection.desc,
    )
    return [item for _, item in present] + missing


def _group_key(value: Any) -> Any:
    # List-valued fields (a trip's destination names) group by the whole sequence
    if isinstance(value, list | tuple):
        return tuple(value)
    if isinstance(value, set | frozenset):
        return tuple(sorted(value, key=str))
    return value


def _group_label(key: Any) -> str:
    if isinstance(key, tuple):
        return ", ".join(str(part) for part in key)
    return str(key)


def group_items(items: list[T], group: GroupKey, schema: QuerySchema[T]) -> dict[Any, list[T]]:
    """Partition items by a field, preserving item order inside each group.

    List-valued fields are keyed by a tuple of their elements.
    """
    get = schema.accessor(group.field)
    groups: dict[Any, list[T]] = {}
    for item in items:
        groups.setdefault(_group_key(get(item)), []).append(item)

    order = group.order or GroupOrder(get_settings().group_order_default)
    if order == GroupOrder.alphabetical:
        keys = sorted(groups, key=lambda k: (k is None, _group_label(k).casefold()))
        groups = {k: groups[k] for k in keys}
    return groups


def evaluate(
    items: Iterable[T],
    spec: QuerySpec,
    schema: QuerySchema[T],
) -> list[T] | dict[Any, list[T]]:
    """Run filter -> sort -> group.

    Args:
        items: Items to query (not modified)
        spec: User selections
        schema: Field accessors for the item type

    Returns:
        Filtered, sorted list, or an ordered dict of lists when spec.group is set

    Raises:
        UnknownQueryField: If the spec names a field the schema lacks
    """
    # Resolve every referenced field up front so bad specs fail even on empty input
    for name in spec.filters:
        schema.accessor(name)
    if spec.sort is not None:
        schema.accessor(spec.sort.field)
    if spec.group is not None:
        schema.accessor(spec.group.field)

    rows = filter_items(list(items), spec, schema)
    rows = sort_items(rows, spec.sort, schema)
    if spec.group is None:
        return rows
    return group_items(rows, spec.group, schema)
