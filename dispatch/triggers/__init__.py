"""Trigger system for dispatch - scheduled distribution passes."""

from dispatch.triggers.scheduler import (
    start_scheduler,
    stop_scheduler,
    run_scheduled_pass,
    is_scheduler_running,
)

__all__ = [
    "start_scheduler",
    "stop_scheduler",
    "run_scheduled_pass",
    "is_scheduler_running",
]
