"""Fixed-point currency amounts"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable

from billing_service.domain.exceptions import ValidationError

DEFAULT_DECIMAL_PRECISION = 2
DEFAULT_CURRENCY = "IDR"


@dataclass(frozen=True)
class Amount:
    """
    Currency value stored as an integer scaled by 10^decimal_precision.

    Example:
        Amount.from_float(1234.567) -> Amount(value=123457, decimal_precision=2, currency="IDR")
    """

    value: int
    decimal_precision: int = DEFAULT_DECIMAL_PRECISION
    currency: str = DEFAULT_CURRENCY

    @classmethod
    def from_float(cls, value: float) -> "Amount":
        """Round to the fixed precision through fixed-point formatting"""
        if not math.isfinite(value):
            raise ValidationError(f"amount must be a finite number, got {value}")
        formatted = f"{value:.{DEFAULT_DECIMAL_PRECISION}f}"
        return cls(
            value=int(formatted.replace(".", "", 1)),
            decimal_precision=DEFAULT_DECIMAL_PRECISION,
            currency=DEFAULT_CURRENCY,
        )

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Amount":
        return cls(value=0, decimal_precision=DEFAULT_DECIMAL_PRECISION, currency=currency)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Amount":
        return cls(
            value=int(data["value"]),
            decimal_precision=int(data["decimal_precision"]),
            currency=data["currency"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "decimal_precision": self.decimal_precision,
            "currency": self.currency,
        }

    def to_float(self) -> float:
        return self.value / 10**self.decimal_precision

    def to_decimal(self) -> Decimal:
        return Decimal(self.value).scaleb(-self.decimal_precision)

    def rescaled(self, decimal_precision: int) -> int:
        """Raw magnitude expressed at a higher (or equal) precision"""
        return self.value * 10 ** (decimal_precision - self.decimal_precision)

    def _check_currency(self, other: "Amount", operation: str) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"{operation} error: amounts needs to have same currency",
                status_code=422,
            )

    def equal_to(self, other: "Amount") -> bool:
        """
        Compare two amounts by raw magnitude.

        Raises:
            ValidationError: If the currencies differ
        """
        self._check_currency(other, "EqualTo")
        precision = max(self.decimal_precision, other.decimal_precision)
        return self.rescaled(precision) == other.rescaled(precision)

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        self._check_currency(other, "Add")
        precision = max(self.decimal_precision, other.decimal_precision)
        return Amount(
            value=self.rescaled(precision) + other.rescaled(precision),
            decimal_precision=precision,
            currency=self.currency,
        )

    def __str__(self) -> str:
        # Shortest plain rendering: 110000, 100.5, 0
        return format(self.to_decimal().normalize(), "f")


def sum_amounts(amounts: Iterable[Amount], currency: str = DEFAULT_CURRENCY) -> Amount:
    """Exact integer sum; an empty iterable sums to zero"""
    total = Amount.zero(currency)
    for amount in amounts:
        total = total + amount
    return total
