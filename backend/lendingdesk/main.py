"""ASGI application factory and console entry point.

Run with: uvicorn lendingdesk.main:create_app --factory --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import argparse
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from redis.asyncio import Redis

from lendingdesk.aggregation.aggregator import ReserveAggregator
from lendingdesk.api.errors import register_exception_handlers
from lendingdesk.api.routes import router
from lendingdesk.cache import SnapshotCache, build_redis_client
from lendingdesk.chain.client import ChainClient, Web3ChainClient
from lendingdesk.chain.reader import OnChainReader
from lendingdesk.config.assets import AssetRegistry
from lendingdesk.config.settings import Settings, settings as default_settings
from lendingdesk.logging_setup import configure_logging
from lendingdesk.transactions.preparer import TransactionPreparer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.cache.close()
    close = getattr(app.state.chain_client, "close", None)
    if close is not None:
        await close()


def create_app(
    settings: Settings | None = None,
    chain_client: ChainClient | None = None,
    redis_client: Redis | None = None,
) -> FastAPI:
    """Wire reader, cache, aggregator and preparer from explicit collaborators."""
    settings = settings or default_settings
    registry = AssetRegistry(settings.assets)
    chain_client = chain_client or Web3ChainClient.from_settings(settings)
    cache = SnapshotCache(redis_client or build_redis_client(settings))

    app = FastAPI(title="LendingDesk", lifespan=lifespan)
    app.state.settings = settings
    app.state.chain_client = chain_client
    app.state.cache = cache
    app.state.aggregator = ReserveAggregator(
        reader=OnChainReader(chain_client, registry),
        cache=cache,
        registry=registry,
        settings=settings,
    )
    app.state.preparer = TransactionPreparer(registry, settings.contracts.pool)

    register_exception_handlers(app)
    app.include_router(router)
    logger.info(
        "LendingDesk ready: chain id %s, %d reserves, pool %s",
        settings.chain_id,
        len(registry),
        settings.contracts.pool,
    )
    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lendingdesk",
        description="Lending pool dashboard API",
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LENDINGDESK_LOG_LEVEL or INFO)",
    )
    return parser


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(args.log_level or default_settings.log_level)
    uvicorn.run(create_app(), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
