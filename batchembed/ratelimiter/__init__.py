from .contracts import ConsumeResult, Policy
from .service import RateLimiterService
from .middleware import RateLimiterMiddleware, client_key

__all__ = [
    "ConsumeResult",
    "Policy",
    "RateLimiterService",
    "RateLimiterMiddleware",
    "client_key",
]
