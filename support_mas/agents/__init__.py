"""Agents package"""
from .base_agent import BaseAgent
from .router_agent import RouterAgent
from .executor_agent import AgentExecutor
from .registry import build_default_mas

__all__ = [
    "BaseAgent",
    "RouterAgent",
    "AgentExecutor",
    "build_default_mas"
]
