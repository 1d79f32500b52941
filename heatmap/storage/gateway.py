"""Heatmap Viewer — Persistence Gateway.

Wraps a storage backend with a per-attempt timeout and exponential-backoff
retry. Each failure is classified once, here, into the error taxonomy; only
transient failures are retried.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, TypeVar

from heatmap.config import Settings
from heatmap.core.errors import NotFoundError, TransientBackendError, classify_error
from heatmap.storage.base import StorageBackend
from heatmap.core.logging import get_logger

logger = get_logger("storage.gateway")

T = TypeVar("T")

MAX_ATTEMPTS = 3
BASE_DELAY_MS = 1000
OPERATION_TIMEOUT = 5.0  # seconds

Sleep = Callable[[float], Awaitable[None]]


async def with_retry(
    operation: Callable[[], T],
    max_attempts: int = MAX_ATTEMPTS,
    base_delay_ms: int = BASE_DELAY_MS,
    timeout: Optional[float] = OPERATION_TIMEOUT,
    sleep: Sleep = asyncio.sleep,
    description: str = "operation",
) -> T:
    """Run a blocking backend call with timeout, classification and backoff.

    The call runs in a worker thread. A transient failure waits
    ``base_delay_ms * 2**attempt`` before the next attempt; a non-retryable
    failure, or the last transient one, is raised as its taxonomy error.
    """
    attempts = max(1, max_attempts)
    for attempt in range(attempts):
        try:
            call = asyncio.to_thread(operation)
            if timeout is not None:
                return await asyncio.wait_for(call, timeout)
            return await call
        except Exception as e:
            error = classify_error(e)
            is_last = attempt == attempts - 1
            if not isinstance(error, TransientBackendError) or is_last:
                logger.error(
                    f"{description} failed after {attempt + 1} attempt(s): {error.message}",
                    extra={"operation": description, "attempt": attempt + 1, "code": error.code},
                )
                if error is e:
                    raise
                raise error from e

            delay_ms = base_delay_ms * (2**attempt)
            logger.warning(
                f"{description} failed, retrying in {delay_ms}ms ({attempt + 1}/{attempts})",
                extra={"operation": description, "attempt": attempt + 1, "delay_ms": delay_ms},
            )
            await sleep(delay_ms / 1000)

    raise TransientBackendError("Max retries exhausted")


class PersistenceGateway:
    """Backend-agnostic save / fetch / list / delete with retry."""

    def __init__(
        self,
        backend: StorageBackend,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay_ms: int = BASE_DELAY_MS,
        timeout: Optional[float] = OPERATION_TIMEOUT,
        sleep: Sleep = asyncio.sleep,
    ):
        self.backend = backend
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.timeout = timeout
        self.sleep = sleep

    @classmethod
    def from_settings(
        cls, backend: StorageBackend, settings: Settings, sleep: Sleep = asyncio.sleep
    ) -> "PersistenceGateway":
        return cls(
            backend,
            max_attempts=settings.retry_max_attempts,
            base_delay_ms=settings.retry_base_delay_ms,
            timeout=settings.operation_timeout_seconds,
            sleep=sleep,
        )

    async def _run(self, operation: Callable[[], T], description: str) -> T:
        return await with_retry(
            operation,
            max_attempts=self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            timeout=self.timeout,
            sleep=self.sleep,
            description=f"{self.backend.name}.{description}",
        )

    # ── Reads ──

    async def list_files(self) -> List[str]:
        return await self._run(self.backend.list_files, "list_files")

    async def list_sheets(self, filename: str) -> List[str]:
        return await self._run(lambda: self.backend.list_sheets(filename), "list_sheets")

    async def fetch_content(self, filename: str, sheet: Optional[str] = None) -> str:
        """Stored text for (filename, sheet). Raises NotFoundError if absent."""
        content = await self._run(
            lambda: self.backend.get_content(filename, sheet), "get_content"
        )
        if content is None:
            label = f"{filename} [{sheet}]" if sheet else filename
            raise NotFoundError(f"File not found: {label}")
        return content

    # ── Writes ──

    async def save(self, filename: str, content: str, sheet: Optional[str] = None) -> None:
        """Idempotent upsert of (filename, sheet)."""
        await self._run(lambda: self.backend.save(filename, content, sheet), "save")

    async def delete(self, filename: str) -> int:
        return await self._run(lambda: self.backend.delete(filename), "delete")

    async def check(self) -> bool:
        return await asyncio.to_thread(self.backend.check)
