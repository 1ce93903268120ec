"""
Sweep Recycle Bin Use Case.

Permanently deletes records whose recycle bin retention window has
elapsed. Triggered on bin listing, by an explicit endpoint and by the
periodic task started with the API.
"""

import asyncio
from datetime import datetime

from propdiary.config import get_logger
from propdiary.core.services import RecycleBinService, SweepResult

logger = get_logger(__name__)


class SweepRecycleBinUseCase:
    """Use case for purging expired tombstones."""

    def __init__(self, recycle_bin_service: RecycleBinService | None = None):
        self._service = recycle_bin_service

    async def _get_service(self) -> RecycleBinService:
        if self._service is None:
            from propdiary.application.services import get_recycle_bin_service
            self._service = await get_recycle_bin_service()
        return self._service

    async def execute(self, now: datetime | None = None) -> SweepResult:
        """
        Run one sweep.

        Args:
            now: Evaluation time (defaults to current UTC time).

        Returns:
            SweepResult with the purged ids per record type.
        """
        service = await self._get_service()
        return await service.sweep(now)


async def run_periodic_sweep(
    interval_seconds: float,
    use_case: SweepRecycleBinUseCase | None = None,
) -> None:
    """
    Sweep forever at a fixed interval until cancelled.

    A failed sweep is logged and retried on the next tick.
    """
    use_case = use_case or SweepRecycleBinUseCase()
    logger.info("periodic_sweep_started", interval_seconds=interval_seconds)

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await use_case.execute()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("periodic_sweep_failed", error=str(e), error_type=type(e).__name__)
