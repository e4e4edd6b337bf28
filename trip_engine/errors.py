"""Typed failures raised by the itinerary engine.

Every mutation either completes or raises one of these with the object graph
left exactly as it was before the call.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trip_engine.models.money import Money


class TripEngineError(Exception):
    """Base class for all engine failures."""

    pass


class InvalidAmount(TripEngineError, ValueError):
    """Raw input does not describe a valid monetary amount."""

    def __init__(self, raw: Any, reason: str = "not a valid amount") -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"invalid amount {raw!r}: {reason}")


class CurrencyMismatch(TripEngineError, ValueError):
    """Arithmetic attempted between two different currencies."""

    def __init__(self, left: str, right: str) -> None:
        self.left = left
        self.right = right
        super().__init__(f"currency mismatch: {left} vs {right}")


class InvalidRange(TripEngineError, ValueError):
    """Date range (or calendar month) is empty or inverted."""

    pass


class NoDayIndex(TripEngineError):
    """Activity has no day index, so it cannot be placed on a date."""

    def __init__(self, activity_name: str) -> None:
        self.activity_name = activity_name
        super().__init__(f"activity {activity_name!r} has no day index")


class IndexOutOfRange(TripEngineError, IndexError):
    """Positional index does not address an element of the collection."""

    def __init__(self, collection: str, index: int, size: int) -> None:
        self.collection = collection
        self.index = index
        self.size = size
        super().__init__(f"{collection} index {index} out of range (size {size})")


class BudgetExceeded(TripEngineError):
    """Adding an activity would push a destination over its budget ceiling.

    Carries the amounts needed to build a user-facing message; formatting is
    left to the presentation layer.
    """

    def __init__(self, ceiling: "Money", current_total: "Money", attempted: "Money") -> None:
        self.ceiling = ceiling
        self.current_total = current_total
        self.attempted = attempted
        super().__init__(
            f"budget ceiling {ceiling.format()} exceeded: "
            f"current {current_total.format()} + attempted {attempted.format()}"
        )

    @property
    def available(self) -> "Money":
        """Amount still available under the ceiling."""
        return self.ceiling - self.current_total

    def details(self) -> dict[str, int]:
        """Structured payload in minor units."""
        return {
            "ceiling_cents": self.ceiling.amount_cents,
            "current_total_cents": self.current_total.amount_cents,
            "attempted_cents": self.attempted.amount_cents,
            "available_cents": self.available.amount_cents,
        }


class UnknownQueryField(TripEngineError, KeyError):
    """Query spec references a field the schema does not define."""

    def __init__(self, field: str, known: list[str]) -> None:
        self.field = field
        self.known = known
        super().__init__(f"unknown query field {field!r}; known fields: {', '.join(known)}")

    def __str__(self) -> str:
        return str(self.args[0])
