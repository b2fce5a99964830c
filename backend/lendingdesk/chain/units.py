"""Fixed-point helpers for protocol integer encodings.

Rates come back in ray units (1e27), token amounts in the token's own decimal
count and account totals in the pool's 8-decimal base currency.
"""

from __future__ import annotations

from decimal import Context, Decimal, Inexact, InvalidOperation, localcontext

from lendingdesk.errors import ValidationError

RAY = 10**27
BASE_CURRENCY_DECIMALS = 8
HEALTH_FACTOR_DECIMALS = 18
MAX_UINT256 = 2**256 - 1

# uint256 values exceed the default 28 significant digits
_CONTEXT = Context(prec=120)


def to_units(raw: int, decimals: int) -> Decimal:
    if decimals <= 0:
        return Decimal(raw)
    with localcontext(_CONTEXT):
        return Decimal(raw).scaleb(-decimals)


def format_units(raw: int, decimals: int) -> str:
    """Render a base-unit integer as a plain decimal string, e.g. ``1000000, 6 -> "1.0"``."""
    value = to_units(int(raw), decimals)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0")
        if text.endswith("."):
            text += "0"
    else:
        text += ".0"
    if text in ("-0.0", "-0"):
        return "0.0"
    return text


def parse_units(amount: str, decimals: int) -> int:
    """Convert a human amount like ``"1.5"`` to base units for a token with ``decimals``."""
    cleaned = (amount or "").strip()
    if not cleaned:
        raise ValidationError("Amount is required.")
    try:
        value = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValidationError(f"Amount '{amount}' is not a number.") from exc
    if not value.is_finite():
        raise ValidationError(f"Amount '{amount}' is not a number.")
    if value <= 0:
        raise ValidationError("Amount must be greater than zero.")

    with localcontext(_CONTEXT) as ctx:
        scaled = value.scaleb(decimals)
        rounded = bool(ctx.flags[Inexact])
    if rounded or scaled != scaled.to_integral_value():
        raise ValidationError(f"Amount '{amount}' has more than {decimals} decimal places.")
    base_units = int(scaled)
    if base_units > MAX_UINT256:
        raise ValidationError("Amount exceeds uint256 range.")
    return base_units


def ray_to_percent(raw: int) -> float:
    with localcontext(_CONTEXT):
        return float(Decimal(int(raw)) / Decimal(RAY) * 100)


def bps_to_percent(raw: int) -> float:
    return float(Decimal(int(raw)) / Decimal(100))
