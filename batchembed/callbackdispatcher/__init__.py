from .service import CallbackDispatcher, build_payload

__all__ = ["CallbackDispatcher", "build_payload"]
