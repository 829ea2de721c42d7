"""Tests for triggers/scheduler.py"""

import asyncio

import pytest
from dispatch.policy.models import DistributionSettings
from dispatch.policy.rules import ConfigurationError
from dispatch.triggers import scheduler


class BrokenService:
    """Stands in for a service whose run fails."""

    def __init__(self, error):
        self.error = error
        self.cancelled = False

    def run_batch(self):
        raise self.error

    def cancel_batch(self):
        self.cancelled = True
        return False


@pytest.fixture(autouse=True)
def reset_scheduler():
    yield
    scheduler.stop_scheduler()


class TestScheduledPass:

    def test_pass_runs_batch(self, service, memory_store, make_staff, make_task):
        memory_store.add_staff(make_staff("a"))
        memory_store.add_task(make_task("t1"))

        result = asyncio.run(scheduler.run_scheduled_pass(service))

        assert result.stats.tasks_processed == 1
        assert scheduler.last_run_at() is not None

    @pytest.mark.parametrize("error", [
        RuntimeError("database unavailable"),
        ConfigurationError(["auto_assign_threshold must be within [0, 100], got 120"]),
    ])
    def test_failed_pass_is_logged_not_raised(self, error):
        assert asyncio.run(scheduler.run_scheduled_pass(BrokenService(error))) is None


class TestLifecycle:

    def test_start_requires_running_loop(self, service):
        with pytest.raises(RuntimeError):
            scheduler.start_scheduler(service, 60)

        assert not scheduler.is_scheduler_running()

    def test_start_and_stop(self, memory_store, make_staff, make_task):
        from dispatch.workflows.service import DistributionService

        memory_store.add_staff(make_staff("a"))
        memory_store.add_task(make_task("t1"))
        service = DistributionService(memory_store, settings=DistributionSettings(auto_assign_threshold=0))

        async def run():
            task = scheduler.start_scheduler(service, 3600)
            assert scheduler.is_scheduler_running()
            assert scheduler.start_scheduler(service, 3600) is task
            for _ in range(100):
                if service.last_result is not None:
                    break
                await asyncio.sleep(0.01)
            scheduler.stop_scheduler()

        asyncio.run(run())

        assert not scheduler.is_scheduler_running()
        assert service.last_result.stats.auto_assignments == 1

    def test_stop_cancels_in_flight_pass(self):
        service = BrokenService(RuntimeError("unused"))

        async def run():
            scheduler.start_scheduler(service, 3600)
            scheduler.stop_scheduler()

        asyncio.run(run())

        assert service.cancelled
