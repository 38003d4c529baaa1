"""
Common Value Objects

Value objects used across the hotel contexts:
- Money: Represents monetary amounts with currency
- DateRange: Represents a stay (check-in to check-out)
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject

SECONDS_PER_DAY = 24 * 60 * 60
CENT = Decimal('0.01')


def nights(start: date | datetime, end: date | datetime) -> int:
    """
    Number of billable nights between two calendar points

    The absolute difference is rounded up to whole days, so any partial
    day is billed as a full night.
    """
    seconds = abs((end - start).total_seconds())
    return math.ceil(seconds / SECONDS_PER_DAY)


def validate_currency(code: str) -> str:
    """Return ``code`` if it looks like an ISO 4217 alphabetic code"""
    if len(code) != 3 or not code.isalpha():
        raise ValueError(f"Unsupported currency: {code!r}")
    return code


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a non-negative monetary amount with an ISO currency code.
    """
    amount: Decimal
    currency: str = 'USD'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        validate_currency(self.currency)

    def __mul__(self, factor: int | Decimal) -> 'Money':
        """Multiply money by a number of units (e.g. nights)"""
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by int or Decimal")
        return Money(self.amount * factor, self.currency)

    def quantized(self) -> Decimal:
        """Amount rounded to cents, as stored in price columns"""
        return self.amount.quantize(CENT, rounding=ROUND_HALF_UP)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a stay from start_date (inclusive) to end_date (exclusive).
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(
                f"Check-out date ({self.end_date}) must be after check-in date ({self.start_date})"
            )

    def __len__(self) -> int:
        """Number of nights in this stay"""
        return nights(self.start_date, self.end_date)

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
