"""
Background reconciliation worker.

The webhook route hands each accepted delivery to this worker and returns
immediately. Jobs run one at a time on a single asyncio task; each job's
outcome is published on the future returned by ``submit``.
"""

import asyncio
from typing import Any

from repoguard.events import InboundEvent
from repoguard.logging import get_logger
from repoguard.reconcile import ReconciliationEngine, ReconciliationResult

logger = get_logger("worker")


def _retrieve_exception(future: "asyncio.Future[Any]") -> None:
    # Failures are logged by the worker; callers need not await the future.
    if not future.cancelled():
        future.exception()


class ReconciliationWorker:
    """
    Queue of pending reconciliations drained by one background task.

    Example:
        ```python
        worker = ReconciliationWorker(engine)
        worker.start()
        future = worker.submit(event)
        result = await future
        await worker.stop()
        ```
    """

    def __init__(self, engine: ReconciliationEngine) -> None:
        self.engine = engine
        self._queue: asyncio.Queue[tuple[InboundEvent, asyncio.Future[ReconciliationResult]]] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        """Number of jobs queued and not yet started."""
        return self._queue.qsize()

    def start(self) -> None:
        """Start the background task on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="repoguard-reconciliation-worker"
        )

    def submit(self, event: InboundEvent) -> "asyncio.Future[ReconciliationResult]":
        """
        Queue a reconciliation for a delivery.

        Args:
            event: The authenticated delivery

        Returns:
            Future resolved with the ReconciliationResult once the job has run

        Raises:
            RuntimeError: If the worker is not running
        """
        if not self.running:
            raise RuntimeError("Reconciliation worker is not running")

        future: asyncio.Future[ReconciliationResult] = asyncio.get_running_loop().create_future()
        future.add_done_callback(_retrieve_exception)
        self._queue.put_nowait((event, future))
        logger.debug(
            "Queued reconciliation of %s (delivery %s)",
            event.repository.name, event.delivery_id,
        )
        return future

    async def join(self) -> None:
        """Wait until every queued job has finished."""
        await self._queue.join()

    async def stop(self) -> None:
        """Finish the queued jobs, then stop the background task."""
        if self._task is None:
            return
        await self.join()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            event, future = await self._queue.get()
            try:
                result = await self.engine.run(event)
            except Exception as e:
                logger.exception(
                    "Reconciliation of %s failed (delivery %s)",
                    event.repository.name, event.delivery_id,
                )
                if not future.done():
                    future.set_exception(e)
            else:
                if not future.done():
                    future.set_result(result)
            finally:
                self._queue.task_done()
