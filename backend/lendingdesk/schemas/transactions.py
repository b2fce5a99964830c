from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel

TransactionAction = Literal["approve", "deposit", "borrow", "repay", "withdraw", "flash-loan"]


class TransactionRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    # presence is checked by the validator so missing fields answer 400, not 422
    user_address: Optional[str] = None
    token_address: Optional[str] = None
    amount: Optional[str] = None
    interest_rate_mode: Optional[StrictInt] = None
    callback_address: Optional[str] = None


class TransactionResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    transaction_hash: str = ""
    from_address: str = Field(alias="from")
    to: str
    data: str
    value: str = "0"
    message: str


class ErrorResponse(BaseModel):
    error: str
    code: Optional[str] = None
    details: Optional[str] = None
    timestamp: str
