from __future__ import annotations

import re

from lendingdesk.config.assets import AssetRegistry
from lendingdesk.errors import ValidationError
from lendingdesk.schemas.asset import Asset

ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")

STABLE_RATE_MODE = 1
VARIABLE_RATE_MODE = 2
INTEREST_RATE_MODES = (STABLE_RATE_MODE, VARIABLE_RATE_MODE)


def is_valid_address(value: object) -> bool:
    return isinstance(value, str) and ADDRESS_RE.fullmatch(value) is not None


def require_address(value: str | None, label: str) -> str:
    if not value:
        raise ValidationError(f"Missing required field: {label}")
    if not is_valid_address(value):
        raise ValidationError(f"Invalid {label} format")
    return value


def require_amount(value: str | None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError("Missing required field: amount")
    return str(value).strip()


def require_interest_rate_mode(value: int | None) -> int:
    if value is None:
        raise ValidationError("Missing required field: interestRateMode")
    if not isinstance(value, int) or isinstance(value, bool) or value not in INTEREST_RATE_MODES:
        raise ValidationError(
            "Invalid interest rate mode. Must be 1 (stable) or 2 (variable)"
        )
    return value


def require_supported_asset(registry: AssetRegistry, token_address: str) -> Asset:
    asset = registry.get(token_address)
    if asset is None:
        raise ValidationError(f"Token {token_address} is not a supported reserve")
    return asset
