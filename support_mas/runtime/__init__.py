"""Runtime package"""
from .session_runtime import SessionRuntime, runtime_executor

__all__ = ["SessionRuntime", "runtime_executor"]
