"""
Monetary amounts returned by a cost provider.

Provider responses carry amounts as strings. Parsing is explicit: a bad
value produces a failed AmountParseResult rather than a silent zero.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from .errors import AmountParseError


@dataclass(frozen=True)
class UsageAmount:
    """Non-negative cost for a window in a single currency."""
    amount: Decimal
    unit: str = "USD"

    def __post_init__(self):
        """Validate amount is not negative."""
        if self.amount < 0:
            raise ValueError("amount cannot be negative")

    def __add__(self, other: "UsageAmount") -> "UsageAmount":
        return UsageAmount(amount=self.amount + other.amount, unit=self.unit)

    def as_float(self) -> float:
        return float(self.amount)

    @classmethod
    def zero(cls, unit: str = "USD") -> "UsageAmount":
        return cls(amount=Decimal("0"), unit=unit)


@dataclass(frozen=True)
class AmountParseResult:
    """Outcome of parsing a provider amount string."""
    value: Optional[Decimal] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Decimal:
        """Return the parsed value or raise AmountParseError."""
        if not self.ok:
            raise AmountParseError(self.error)
        return self.value


def parse_amount(raw: Optional[str], allow_negative: bool = False) -> AmountParseResult:
    """Parse an amount string into a Decimal.

    Args:
        raw: Amount as returned by the provider, e.g. "12.3456"
        allow_negative: Accept negative values (credits on a single day)

    Returns:
        AmountParseResult holding either the value or an error message
    """
    if raw is None:
        return AmountParseResult(error="amount is missing")

    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return AmountParseResult(error=f"invalid amount {raw!r}")

    if not value.is_finite():
        return AmountParseResult(error=f"amount is not finite: {raw!r}")
    if value < 0 and not allow_negative:
        return AmountParseResult(error=f"amount is negative: {raw!r}")

    return AmountParseResult(value=value)
