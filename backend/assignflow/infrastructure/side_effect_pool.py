"""Side-Effect Pool — bounded asyncio worker pool for post-commit side effects.

Invariants:
    - submit() never blocks and never raises: a full queue or stopped pool drops
      the command and logs a SideEffectError
    - A failing command is logged with assignment_id, booking_id, operation,
      side_effect and never retried
    - No ordering guarantee between commands; no cancellation once a worker picked one up
    - drain() returns once every submitted command has finished (tests, shutdown)

Design Decisions:
    - asyncio.Queue + fixed worker tasks over bare create_task(): bounded memory,
      supervised failures, deterministic shutdown
    - No per-command timeout: each port owns its own timeout/retry policy
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from assignflow.core.errors import ErrorContext, SideEffectError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SideEffectCommand:
    """One unit of best-effort work tied to a committed transition."""
    side_effect: str
    operation: str
    assignment_id: str
    booking_id: str
    run: Callable[[], Awaitable[object]]

    def error_context(self) -> ErrorContext:
        return ErrorContext(
            assignment_id=self.assignment_id,
            booking_id=self.booking_id,
            operation=self.operation,
            side_effect=self.side_effect,
        )


class SideEffectPool:
    """Fixed number of workers consuming a bounded command queue."""

    def __init__(self, workers: int = 4, queue_size: int = 1000):
        self._worker_count = workers
        self._queue: asyncio.Queue[SideEffectCommand] = asyncio.Queue(
            maxsize=queue_size,
        )
        self._workers: list[asyncio.Task] = []
        self._accepting = False
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._accepting

    def start(self) -> None:
        if self._workers:
            return
        self._accepting = True
        self._workers = [
            asyncio.create_task(self._work(), name=f"side-effect-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info(f"Side-effect pool started with {self._worker_count} workers")

    def submit(self, command: SideEffectCommand) -> bool:
        """Enqueue command. Returns False (and logs) if it was dropped."""
        if not self._accepting:
            self._record_failure(command, SideEffectError(
                command.side_effect, "pool is not running",
                command.error_context(),
            ))
            return False
        try:
            self._queue.put_nowait(command)
        except asyncio.QueueFull:
            self._record_failure(command, SideEffectError(
                command.side_effect, "queue full, command dropped",
                command.error_context(),
            ))
            return False
        return True

    async def drain(self) -> None:
        """Wait until every queued command has been processed."""
        await self._queue.join()

    async def shutdown(self, timeout: float = 10.0) -> None:
        """Stop accepting, finish queued work within timeout, then stop workers."""
        self._accepting = False
        try:
            await asyncio.wait_for(self._queue.join(), timeout)
        except asyncio.TimeoutError:
            logger.error(
                f"Side-effect pool shutdown timed out with "
                f"{self._queue.qsize()} commands pending",
            )
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logger.info("Side-effect pool stopped")

    async def _work(self) -> None:
        while True:
            command = await self._queue.get()
            try:
                await command.run()
            except asyncio.CancelledError:
                raise
            except SideEffectError as e:
                self._record_failure(command, e)
            except Exception as e:
                self._record_failure(command, SideEffectError(
                    command.side_effect, str(e) or type(e).__name__,
                    command.error_context(),
                ), exc_info=True)
            finally:
                self._queue.task_done()

    def _record_failure(
        self, command: SideEffectCommand, error: SideEffectError,
        exc_info: bool = False,
    ) -> None:
        self.failures += 1
        logger.error(
            error.message,
            extra={
                "assignment_id": command.assignment_id,
                "booking_id": command.booking_id,
                "operation": command.operation,
                "side_effect": command.side_effect,
                "error_code": error.code,
            },
            exc_info=exc_info,
        )
