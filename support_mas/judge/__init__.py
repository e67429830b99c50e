"""Judge package"""
from .team import JudgeTeam, DEFAULT_JUDGES

__all__ = ["JudgeTeam", "DEFAULT_JUDGES"]
