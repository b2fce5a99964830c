import logging

from fastapi import APIRouter, Depends, Response

from lendingdesk.aggregation.aggregator import ReserveAggregator
from lendingdesk.api.deps import get_aggregator, get_preparer
from lendingdesk.schemas.analytics import AnalyticsResponse
from lendingdesk.schemas.chain import ReserveView, UserAccountSnapshot
from lendingdesk.schemas.transactions import (
    TransactionAction,
    TransactionRequest,
    TransactionResponse,
)
from lendingdesk.transactions.preparer import ACTION_MESSAGES, TransactionPreparer
from lendingdesk.validation.validator import require_address

logger = logging.getLogger(__name__)

router = APIRouter()

CACHE_HEADER = "X-Cache"


def _cache_status(hit: bool) -> str:
    return "HIT" if hit else "MISS"


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    aggregator: ReserveAggregator = Depends(get_aggregator),
) -> AnalyticsResponse:
    return await aggregator.analytics()


@router.get("/reserves", response_model=list[ReserveView])
async def list_reserves(
    aggregator: ReserveAggregator = Depends(get_aggregator),
) -> list[ReserveView]:
    return await aggregator.reserves()


@router.get("/balance")
async def get_balance(
    response: Response,
    user: str | None = None,
    token: str | None = None,
    aggregator: ReserveAggregator = Depends(get_aggregator),
) -> dict:
    user_address = require_address(user, "user address")
    token_address = require_address(token, "token address")

    snapshot, hit = await aggregator.balance(user_address, token_address)
    response.headers[CACHE_HEADER] = _cache_status(hit)
    return {"balance": snapshot.balance}


@router.get("/allowance")
async def get_allowance(
    response: Response,
    user: str | None = None,
    token: str | None = None,
    aggregator: ReserveAggregator = Depends(get_aggregator),
) -> dict:
    user_address = require_address(user, "user address")
    token_address = require_address(token, "token address")

    snapshot, hit = await aggregator.allowance(user_address, token_address)
    response.headers[CACHE_HEADER] = _cache_status(hit)
    return {"allowance": snapshot.allowance, "spender": snapshot.spender}


@router.get("/user/account", response_model=UserAccountSnapshot)
async def get_user_account(
    response: Response,
    address: str | None = None,
    aggregator: ReserveAggregator = Depends(get_aggregator),
) -> UserAccountSnapshot:
    account_address = require_address(address, "Ethereum address")
    logger.debug("Fetching user account data for %s", account_address)

    snapshot, hit = await aggregator.user_account(account_address)
    response.headers[CACHE_HEADER] = _cache_status(hit)
    return snapshot


@router.post("/transactions/{action}", response_model=TransactionResponse)
def prepare_transaction(
    action: TransactionAction,
    payload: TransactionRequest,
    preparer: TransactionPreparer = Depends(get_preparer),
) -> TransactionResponse:
    transaction = preparer.prepare(action, payload)
    return TransactionResponse(
        from_address=transaction.from_address,
        to=transaction.to,
        data=transaction.data,
        value=transaction.value,
        message=ACTION_MESSAGES[action],
    )
