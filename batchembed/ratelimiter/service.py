from __future__ import annotations

import math
import time
from typing import Callable, Optional

from .contracts import ConsumeResult, Policy
from .store import InMemoryStore

TimeFn = Callable[[], float]


class RateLimiterService:
    """Token bucket per client key, refilled continuously at ``policy.rate``."""

    def __init__(self, policy: Policy, store: Optional[InMemoryStore] = None, now: Optional[TimeFn] = None):
        self.policy = policy
        self.store = store or InMemoryStore()
        self._now = now or time.monotonic

    def consume(self, key: str, cost: int = 1) -> ConsumeResult:
        policy = self.policy
        now = self._now()
        decision: dict = {}

        def upd(curr):
            if not curr:
                curr = {"tokens": float(policy.burst), "last_refill_ts": now}
            elapsed = max(0.0, now - curr["last_refill_ts"])
            tokens = min(float(policy.burst), curr["tokens"] + elapsed * policy.rate)
            allowed = tokens >= cost
            retry_after = None
            if allowed:
                tokens -= cost
            else:
                retry_after = math.ceil((cost - tokens) / policy.rate)
            decision.update({"allowed": allowed, "remaining": tokens, "retry_after": retry_after})
            return {"tokens": tokens, "last_refill_ts": now}

        self.store.update(self._bucket_key(key), upd)
        return ConsumeResult(key=key, **decision)

    def _bucket_key(self, key: str) -> str:
        return f"ratelimiter:{self.policy.name}:{key}"
