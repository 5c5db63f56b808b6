"""
Shared field types.

Spreads and pick scores are exact decimals: half-point lines must compare
equal to zero exactly when a game pushes. They are stored and sent over
the wire as decimal strings ("-3.5"), never as binary floats.
"""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer


def _coerce_decimal(value: Any) -> Any:
    # float -> str first so 3.5 stays 3.5 and 0.1 does not become 0.1000000000000000055...
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def format_decimal(value: Decimal) -> str:
    """Plain notation without trailing zeros: Decimal("1.0") -> "1", Decimal("-3.50") -> "-3.5"."""
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "0") else text


ExactDecimal = Annotated[
    Decimal,
    BeforeValidator(_coerce_decimal),
    PlainSerializer(format_decimal, return_type=str),
]
