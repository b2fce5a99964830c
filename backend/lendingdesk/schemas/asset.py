from pydantic import BaseModel, ConfigDict


class Asset(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    decimals: int
    symbol: str
    name: str
