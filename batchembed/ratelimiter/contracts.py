from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt


class Policy(BaseModel):
    name: str = Field("per_client", description="Policy name, part of the bucket key")
    rate: PositiveFloat = Field(..., description="Tokens refilled per second")
    burst: PositiveInt = Field(..., description="Max tokens in bucket")


class ConsumeResult(BaseModel):
    allowed: bool
    remaining: float
    retry_after: Optional[int] = None
    key: str
