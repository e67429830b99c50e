"""Utilities package"""
from .helpers import format_duration, truncate_text, timestamp_now, round_half_up, clamp

__all__ = ["format_duration", "truncate_text", "timestamp_now", "round_half_up", "clamp"]
