"""Destination - a named section of a trip that owns its budget ceiling."""

from pydantic import BaseModel, Field, field_validator

from trip_engine.errors import BudgetExceeded, IndexOutOfRange
from trip_engine.models.activity import Activity
from trip_engine.models.dates import DateWindow
from trip_engine.models.money import Money, MoneyField
from trip_engine.utils.logging import mutation_log


def _validate_ceiling(v: Money | None) -> Money | None:
    if v is not None and v.amount_cents < 0:
        raise ValueError("budget ceiling must not be negative")
    return v


class DestinationPatch(BaseModel):
    """Edit of a destination's own fields.

    Only fields explicitly set are applied, so passing budget_ceiling=None
    clears the ceiling while omitting it leaves the ceiling alone.
    """

    name: str | None = None
    window: DateWindow | None = None
    budget_ceiling: MoneyField | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name_not_blank(cls, v: str | None) -> str | None:
        """Ensure a renamed destination keeps a visible name."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("destination name must not be empty")
        return v

    validate_ceiling = field_validator("budget_ceiling")(_validate_ceiling)


class Destination(BaseModel):
    """Named stop within a trip with a date window, ceiling and activities."""

    name: str
    window: DateWindow | None = None
    budget_ceiling: MoneyField | None = None
    activities: list[Activity] = Field(default_factory=list)
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name_not_blank(cls, v: str) -> str:
        """Ensure name has visible characters."""
        v = v.strip()
        if not v:
            raise ValueError("destination name must not be empty")
        return v

    validate_ceiling = field_validator("budget_ceiling")(_validate_ceiling)

    @classmethod
    def create(
        cls,
        name: str,
        *,
        window: DateWindow | None = None,
        budget_ceiling: Money | str | None = None,
        notes: str | None = None,
        activities: list[Activity] | None = None,
    ) -> "Destination":
        """Build a destination, admitting initial activities through the ceiling check."""
        destination = cls(name=name, window=window, budget_ceiling=budget_ceiling, notes=notes)
        for activity in activities or []:
            destination.add_activity(activity)
        return destination

    @property
    def has_ceiling(self) -> bool:
        """A ceiling of zero means "no budget set"."""
        return self.budget_ceiling is not None and self.budget_ceiling.is_positive

    def total_activity_budget(self) -> Money:
        """Sum of activity budgets."""
        currency = self.budget_ceiling.currency if self.budget_ceiling is not None else None
        return Money.sum((a.budget for a in self.activities), currency)

    def remaining_budget(self) -> Money | None:
        """Ceiling minus activity total, or None when no ceiling is active."""
        ceiling = self.budget_ceiling
        if ceiling is None or not ceiling.is_positive:
            return None
        return ceiling - self.total_activity_budget()

    def add_activity(self, activity: Activity) -> list[Activity]:
        """Append an activity if it fits under the ceiling.

        Args:
            activity: Activity to append

        Returns:
            Copy of the updated activity list

        Raises:
            BudgetExceeded: If the ceiling is active and would be exceeded;
                the activity list is left unchanged
        """
        current_total = self.total_activity_budget()

        ceiling = self.budget_ceiling
        if ceiling is not None and ceiling.is_positive:
            if current_total + activity.budget > ceiling:
                error = BudgetExceeded(
                    ceiling=ceiling,
                    current_total=current_total,
                    attempted=activity.budget,
                )
                mutation_log.log_mutation(
                    entity="destination",
                    operation="add_activity",
                    outcome="rejected",
                    name=self.name,
                    reason="budget_exceeded",
                    activity=activity.name,
                    **error.details(),
                )
                raise error

        self.activities.append(activity)
        mutation_log.log_mutation(
            entity="destination",
            operation="add_activity",
            outcome="accepted",
            name=self.name,
            activity=activity.name,
            total_cents=current_total.amount_cents + activity.budget.amount_cents,
        )
        return list(self.activities)

    def remove_activity(self, index: int) -> list[Activity]:
        """Remove the activity at index and return a copy of the updated list.

        Raises:
            IndexOutOfRange: If index does not address an activity (negative
                indices are never valid)
        """
        if not 0 <= index < len(self.activities):
            mutation_log.log_mutation(
                entity="destination",
                operation="remove_activity",
                outcome="rejected",
                name=self.name,
                reason="index_out_of_range",
                index=index,
                size=len(self.activities),
            )
            raise IndexOutOfRange("activity", index, len(self.activities))

        removed = self.activities.pop(index)
        mutation_log.log_mutation(
            entity="destination",
            operation="remove_activity",
            outcome="accepted",
            name=self.name,
            activity=removed.name,
        )
        return list(self.activities)

    def apply(self, patch: DestinationPatch) -> "Destination":
        """Apply an edit to this destination's own fields.

        Existing activities are not re-checked against a lowered ceiling; the
        ceiling only gates activities added afterwards.
        """
        for field in patch.model_fields_set:
            value = getattr(patch, field)
            if field == "name" and value is None:
                continue
            setattr(self, field, value)

        mutation_log.log_mutation(
            entity="destination",
            operation="apply",
            outcome="accepted",
            name=self.name,
            fields=sorted(patch.model_fields_set),
        )
        return self
