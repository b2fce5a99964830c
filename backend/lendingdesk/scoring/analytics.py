"""Derived reserve metrics.

Risk tier and health here are placeholder heuristics pending a real risk
model; the TVL series is synthesized from current totals and is not history.
"""

from __future__ import annotations

import datetime
import random

from lendingdesk.config.settings import AnalyticsSettings
from lendingdesk.schemas.analytics import (
    AnalyticsMetrics,
    AnalyticsResponse,
    RiskMetric,
    TvlPoint,
    UtilizationEntry,
)
from lendingdesk.schemas.chain import ReserveView

RISK_LOW = "Low"
RISK_MEDIUM = "Medium"


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def utilization(available: float, borrowed: float) -> float:
    total = available + borrowed
    if total <= 0:
        return 0.0
    return clamp(borrowed / total * 100)


def risk_tier(utilization_percent: float, medium_threshold: float = 75.0) -> str:
    return RISK_MEDIUM if utilization_percent > medium_threshold else RISK_LOW


def placeholder_health(available: float, borrowed: float) -> float | None:
    if borrowed <= 0:
        return None
    return round((available + borrowed) / borrowed, 2)


def format_billions(value: float) -> str:
    return f"${value / 1_000_000_000:.2f}B"


def synthesize_tvl_series(
    total_tvl: float,
    total_borrowed: float,
    days: int = 7,
    jitter: float = 0.1,
    rng: random.Random | None = None,
    today: datetime.date | None = None,
) -> list[TvlPoint]:
    """Placeholder trailing series: today's totals scaled by ``1 - U(0, jitter)`` per day."""
    rng = rng or random.Random()
    today = today or datetime.date.today()
    deposits = total_tvl - total_borrowed

    points: list[TvlPoint] = []
    for offset in range(days - 1, -1, -1):
        day = today - datetime.timedelta(days=offset)
        variance = 1 - rng.random() * jitter
        points.append(
            TvlPoint(
                date=f"{day:%b} {day.day}",
                tvl=round(total_tvl * variance / 1_000_000),
                deposits=round(deposits * variance / 1_000_000),
                borrows=round(total_borrowed * variance / 1_000_000),
            )
        )
    return points


def build_analytics(
    reserves: list[ReserveView],
    config: AnalyticsSettings,
    rng: random.Random | None = None,
    today: datetime.date | None = None,
) -> AnalyticsResponse:
    total_tvl = 0.0
    total_borrowed = 0.0
    utilization_data: list[UtilizationEntry] = []
    risk_metrics: list[RiskMetric] = []

    for reserve in reserves:
        available = float(reserve.available_liquidity)
        borrowed = float(reserve.total_variable_debt) + float(reserve.total_stable_debt)
        total_tvl += available + borrowed
        total_borrowed += borrowed

        usage = utilization(available, borrowed)
        utilization_data.append(
            UtilizationEntry(
                asset=reserve.asset.symbol,
                utilization=usage,
                apy=reserve.liquidity_rate,
                borrow=reserve.variable_borrow_rate,
            )
        )
        risk_metrics.append(
            RiskMetric(
                reserve=reserve.asset.symbol,
                ltv=round(usage),
                threshold=config.liquidation_threshold,
                health=placeholder_health(available, borrowed),
                risk=risk_tier(usage, config.medium_risk_utilization),
            )
        )

    average_utilization = 0.0
    if utilization_data:
        average_utilization = sum(entry.utilization for entry in utilization_data) / len(
            utilization_data
        )

    return AnalyticsResponse(
        tvl_data=synthesize_tvl_series(
            total_tvl,
            total_borrowed,
            days=config.tvl_window_days,
            jitter=config.tvl_jitter,
            rng=rng,
            today=today,
        ),
        utilization_data=utilization_data,
        risk_metrics=risk_metrics,
        metrics=AnalyticsMetrics(
            tvl=format_billions(total_tvl),
            borrowed=format_billions(total_borrowed),
            average_utilization=round(average_utilization, 2),
            reserves_tracked=len(reserves),
        ),
    )
