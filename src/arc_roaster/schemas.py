from pydantic import BaseModel, ConfigDict, Field


class RecentTx(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hash: str | None = None
    timestamp: str | int | None = Field(default=None, alias='timeStamp')
    is_error: str | int | None = Field(default=None, alias='isError')


class WalletSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str
    tx_count: int = Field(..., ge=0, alias='txCount')
    usdc_balance: float = Field(default=0.0, ge=0, alias='usdcBalance')
    recent_txs: list[RecentTx] = Field(default_factory=list, max_length=5, alias='recentTxs')


class RoastResult(WalletSnapshot):
    roast: str = Field(..., min_length=1)


class ErrorResponse(BaseModel):
    error: str


class TraceStep(BaseModel):
    step: str
    duration_ms: int
    ok: bool
    detail: str | None = None
    fallbacks: list[str] = Field(default_factory=list)
