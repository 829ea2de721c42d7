"""
Scheduled distribution passes.

Periodically runs a batch over the pending tasks. The pass itself is
blocking, so it runs in a worker thread; the loop only sleeps and logs.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from dispatch.policy.rules import ConfigurationError
from dispatch.workflows.models import BatchResult
from dispatch.workflows.service import DistributionService

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 15 * 60

_scheduler_running = False
_scheduler_task: Optional[asyncio.Task] = None
_scheduler_service: Optional[DistributionService] = None
_last_run_at: Optional[datetime] = None


async def run_scheduled_pass(service: DistributionService) -> Optional[BatchResult]:
    """Run one pass; failures are logged and the schedule carries on."""
    global _last_run_at

    try:
        result = await asyncio.to_thread(service.run_batch)
    except ConfigurationError as e:
        logger.error(f"Scheduled pass refused, bad settings: {e}")
        return None
    except Exception as e:
        logger.error(f"Scheduled pass failed: {e}", exc_info=True)
        return None

    _last_run_at = datetime.now()
    logger.info(
        f"Scheduled pass: {result.stats.auto_assignments}/{result.stats.tasks_processed} auto-assigned"
    )
    return result


async def _scheduler_loop(service: DistributionService, interval_seconds: float):
    logger.info(f"Scheduler started (every {interval_seconds}s)")

    while _scheduler_running:
        try:
            await run_scheduled_pass(service)
            await asyncio.sleep(interval_seconds)
        except asyncio.CancelledError:
            logger.info("Scheduler cancelled")
            break

    logger.info("Scheduler stopped")


def start_scheduler(
    service: DistributionService,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
) -> Optional[asyncio.Task]:
    """Start the background scheduler; must be called from a running event loop."""
    global _scheduler_running, _scheduler_task, _scheduler_service

    if _scheduler_running:
        logger.warning("Scheduler already running")
        return _scheduler_task

    loop = asyncio.get_running_loop()
    _scheduler_running = True
    _scheduler_service = service
    _scheduler_task = loop.create_task(_scheduler_loop(service, interval_seconds))
    return _scheduler_task


def stop_scheduler():
    """Stop the scheduler and ask an in-flight pass to stop between tasks."""
    global _scheduler_running, _scheduler_task, _scheduler_service

    if not _scheduler_running:
        return

    _scheduler_running = False
    if _scheduler_service is not None:
        _scheduler_service.cancel_batch()
    if _scheduler_task:
        _scheduler_task.cancel()

    _scheduler_task = None
    _scheduler_service = None


def is_scheduler_running() -> bool:
    return _scheduler_running


def last_run_at() -> Optional[datetime]:
    return _last_run_at
