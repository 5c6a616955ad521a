"""Data models for activity-logger"""

from .enums import ActivityKind

__all__ = [
    "ActivityKind",
]
