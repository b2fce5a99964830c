from __future__ import annotations

from pydantic import Field

from lendingdesk.schemas.chain import CamelModel


class TvlPoint(CamelModel):
    date: str
    # millions, in summed native token units
    tvl: int
    deposits: int
    borrows: int


class UtilizationEntry(CamelModel):
    asset: str
    utilization: float
    apy: float
    borrow: float


class RiskMetric(CamelModel):
    reserve: str
    ltv: int
    threshold: float
    health: float | None = None
    risk: str


class AnalyticsMetrics(CamelModel):
    tvl: str
    borrowed: str
    average_utilization: float
    reserves_tracked: int


class AnalyticsResponse(CamelModel):
    tvl_data: list[TvlPoint] = Field(default_factory=list)
    # tvl_data is generated from current totals, not recorded history
    tvl_data_synthetic: bool = True
    utilization_data: list[UtilizationEntry] = Field(default_factory=list)
    risk_metrics: list[RiskMetric] = Field(default_factory=list)
    metrics: AnalyticsMetrics
