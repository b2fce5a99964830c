from fastapi import Request

from lendingdesk.aggregation.aggregator import ReserveAggregator
from lendingdesk.transactions.preparer import TransactionPreparer


def get_aggregator(request: Request) -> ReserveAggregator:
    """FastAPI dependency returning the app-scoped aggregator."""
    return request.app.state.aggregator


def get_preparer(request: Request) -> TransactionPreparer:
    return request.app.state.preparer
