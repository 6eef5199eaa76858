# Domain Scheduling Package
from .histogram import DueDateHistogram
from .models import (
    Card,
    CardStatistics,
    ReviewOutcome,
    ReviewResponse,
    ScheduleInfo,
    SchedulerSettings,
)

__all__ = [
    "Card",
    "CardStatistics",
    "DueDateHistogram",
    "ReviewOutcome",
    "ReviewResponse",
    "ScheduleInfo",
    "SchedulerSettings",
]
