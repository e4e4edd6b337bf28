"""Fixed-point money value type - all budget arithmetic goes through here."""

import re
from collections.abc import Iterable
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from trip_engine.config import get_settings
from trip_engine.errors import CurrencyMismatch, InvalidAmount

# Everything except digits, '.' and '-' is decoration ("$", ",", spaces, "USD").
_STRIP_RE = re.compile(r"[^0-9.\-]")
_AMOUNT_RE = re.compile(r"^(-)?(\d*)(?:\.(\d{0,2}))?$")


def _default_currency() -> str:
    return get_settings().default_currency


class Money(BaseModel):
    """Monetary amount in minor units (cents)."""

    model_config = ConfigDict(frozen=True)

    amount_cents: int
    currency: str = Field(default_factory=_default_currency)

    @classmethod
    def parse(
        cls,
        raw: str | int | Decimal,
        *,
        allow_negative: bool = False,
        currency: str | None = None,
    ) -> "Money":
        """Parse a "$1,234.56"-style string into Money.

        Args:
            raw: Amount as typed by a user or stored in a document
            allow_negative: Accept a leading '-' (display adjustments only)
            currency: Currency code (default from settings)

        Returns:
            Parsed amount

        Raises:
            InvalidAmount: If the stripped text is not a decimal with at most
                two fractional digits, or is negative when not allowed
        """
        if isinstance(raw, bool) or not isinstance(raw, str | int | Decimal):
            raise InvalidAmount(raw, "unsupported type")

        # Decimals print in plain notation; str() may give "1E+2"
        plain = format(raw, "f") if isinstance(raw, Decimal) else str(raw)
        text = _STRIP_RE.sub("", plain)
        match = _AMOUNT_RE.match(text)
        if match is None:
            raise InvalidAmount(raw)

        sign, whole, fraction = match.groups()
        if not whole and not fraction:
            raise InvalidAmount(raw, "no digits")
        if sign and not allow_negative:
            raise InvalidAmount(raw, "negative amounts are not allowed")

        cents = int(whole or "0") * 100 + int((fraction or "").ljust(2, "0"))
        if sign:
            cents = -cents

        return cls(amount_cents=cents, currency=currency or _default_currency())

    @classmethod
    def from_cents(cls, cents: int, currency: str | None = None) -> "Money":
        """Build Money from an integer amount of minor units."""
        return cls(amount_cents=cents, currency=currency or _default_currency())

    @classmethod
    def zero(cls, currency: str | None = None) -> "Money":
        """Zero amount."""
        return cls.from_cents(0, currency)

    @classmethod
    def sum(cls, amounts: Iterable["Money"], currency: str | None = None) -> "Money":
        """Exact sum of amounts (zero for an empty iterable)."""
        total = cls.zero(currency)
        for amount in amounts:
            total = total.add(amount)
        return total

    def _check_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatch(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(amount_cents=self.amount_cents + other.amount_cents, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(amount_cents=self.amount_cents - other.amount_cents, currency=self.currency)

    def compare(self, other: "Money") -> int:
        """Three-way comparison: -1, 0 or 1."""
        self._check_currency(other)
        return (self.amount_cents > other.amount_cents) - (self.amount_cents < other.amount_cents)

    def __add__(self, other: object) -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) >= 0

    @property
    def is_zero(self) -> bool:
        return self.amount_cents == 0

    @property
    def is_positive(self) -> bool:
        return self.amount_cents > 0

    def format(self, symbol: str | None = None) -> str:
        """Render as symbol + grouped integer part + '.' + two minor digits."""
        if symbol is None:
            symbol = get_settings().currency_symbol
        sign = "-" if self.amount_cents < 0 else ""
        whole, minor = divmod(abs(self.amount_cents), 100)
        return f"{sign}{symbol}{whole:,}.{minor:02d}"

    def __str__(self) -> str:
        return self.format()


def coerce_money(value: Any) -> Any:
    """Parse raw amounts at a model boundary; leave Money and dicts to pydantic."""
    if isinstance(value, str | int | Decimal) and not isinstance(value, bool):
        return Money.parse(value)
    return value


# Model field type that accepts "$12.50", 12, Decimal("12.5") or Money.
MoneyField = Annotated[Money, BeforeValidator(coerce_money)]
