"""
Visit Pipeline

Records redirect analytics without slowing down redirects.

Request handlers hand raw visits to a bounded in-memory queue; a single
background worker enriches each visit (GeoIP lookup, user agent
classification) and appends it to a JSON-lines log.

Design Decisions:
- record() never awaits: enqueue is attempted once and the visit is
  dropped with a warning when the queue is full
- One worker task, so log writes need no coordination
- The worker never blocks the event loop: log appends go through
  aiofiles and user agent parsing runs in a worker thread
- shutdown() enqueues a close marker behind every admitted visit and waits
  for the worker to reach it; the marker is the worker's only exit
- Enrichment and write failures are logged per visit and never stop the
  worker
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

import aiofiles

from redirector.core.exceptions import VisitLogError
from redirector.services.geoip_service import GeoIPService
from redirector.services.user_agent import UserAgentInfo, classify_user_agent
from redirector.services.visit_event import VisitEvent, utc_now

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100

# Enqueued once by shutdown(), always the last item the worker sees
_CLOSED = object()


class VisitPipeline:
    """
    Bounded, single-consumer sink for visit events.

    Build with ``await VisitPipeline.start(...)`` inside a running event
    loop; it opens the log and starts the worker.
    """

    def __init__(
        self,
        log_file,
        geoip: Optional[GeoIPService] = None,
        classifier: Callable[[str], UserAgentInfo] = classify_user_agent,
        capacity: int = DEFAULT_QUEUE_SIZE,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Args:
            log_file: Async text file opened for appending (aiofiles)
        """
        self.log_file = log_file
        self.geoip = geoip
        self.classifier = classifier
        self.clock = clock
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        self._worker: Optional[asyncio.Task] = None
        self._closing = False
        self._dropped = 0
        self._written = 0

    @classmethod
    async def start(
        cls,
        path: str,
        geoip: Optional[GeoIPService] = None,
        classifier: Callable[[str], UserAgentInfo] = classify_user_agent,
        capacity: int = DEFAULT_QUEUE_SIZE,
        clock: Callable[[], datetime] = utc_now
    ) -> "VisitPipeline":
        """
        Open the visit log for appending and start the worker.

        Args:
            path: Visit log location, created if missing
            geoip: Optional GeoIP service; without it country/city stay empty
            classifier: User agent classifier, run in a worker thread
            capacity: Maximum number of queued visits
            clock: Returns the current UTC time for new visits

        Raises:
            VisitLogError: If the log cannot be opened for appending
        """
        try:
            log_file = await aiofiles.open(path, mode="a", encoding="utf-8")
        except OSError as e:
            raise VisitLogError(f"cannot open '{path}' for append", e) from e

        pipeline = cls(log_file, geoip=geoip, classifier=classifier, capacity=capacity, clock=clock)
        pipeline._worker = asyncio.create_task(pipeline._run(), name="visit-pipeline-worker")
        logger.info(f"Visit pipeline started: log={path}, capacity={capacity}")
        return pipeline

    @property
    def dropped(self) -> int:
        """Visits discarded because the queue was full."""
        return self._dropped

    @property
    def written(self) -> int:
        """Visits appended to the log."""
        return self._written

    @property
    def pending(self) -> int:
        """Visits waiting for the worker."""
        return self._queue.qsize()

    def record(
        self,
        slug: str,
        *,
        ip: str = "",
        user_agent: str = "",
        referer: str = "",
        query_params: str = "",
        language: str = ""
    ) -> None:
        """
        Queue a visit for enrichment and logging.

        Never blocks and never raises: when the queue is full the visit is
        dropped and a warning is logged.
        """
        if self._closing:
            logger.warning(f"Visit pipeline is shutting down, dropping visit: slug={slug}")
            self._dropped += 1
            return

        event = VisitEvent(
            timestamp=self.clock(),
            slug=slug,
            ip=ip,
            user_agent=user_agent,
            referer=referer,
            query_params=query_params,
            language=language,
        )

        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._dropped += 1
            logger.warning(f"Visit queue full, dropping visit: slug={slug}")

    async def shutdown(self) -> None:
        """
        Drain queued visits, stop the worker and close the log.

        Callers must stop producing first; visits recorded after this is
        called are dropped. The log is closed even if the worker has died.

        Raises:
            VisitLogError: If the log file cannot be closed
        """
        if self._closing:
            logger.warning("Visit pipeline already shut down")
            return

        self._closing = True
        logger.info(f"Draining visit pipeline: pending={self.pending}")

        try:
            if self._worker is not None:
                await self._stop_worker()
        finally:
            try:
                await self.log_file.close()
            except OSError as e:
                raise VisitLogError("failed to close visit log", e) from e

        logger.info(
            f"Visit pipeline stopped: written={self._written}, dropped={self._dropped}"
        )

    async def _stop_worker(self) -> None:
        # Waiting for room in a full queue must not outlive the worker
        closer = asyncio.ensure_future(self._queue.put(_CLOSED))
        await asyncio.wait({closer, self._worker}, return_when=asyncio.FIRST_COMPLETED)
        if not closer.done():
            closer.cancel()

        try:
            await self._worker
        except Exception as e:
            logger.error(
                f"Visit pipeline worker stopped unexpectedly, "
                f"{self.pending} visits lost: {e}",
                exc_info=True
            )

    async def _run(self) -> None:
        """Worker loop: enrich and write visits until the close marker."""
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return

            event = await self._enrich(item)
            await self._write(event)

    async def _enrich(self, event: VisitEvent) -> VisitEvent:
        # Each step degrades on its own, a failed lookup keeps the UA fields
        update = {}

        if self.geoip is not None:
            try:
                update["country"], update["city"] = await self.geoip.lookup(event.ip)
            except Exception as e:
                logger.error(f"GeoIP lookup failed for visit {event.slug}: {e}", exc_info=True)

        try:
            ua = await asyncio.to_thread(self.classifier, event.user_agent)
        except Exception as e:
            logger.error(f"User agent classification failed for visit {event.slug}: {e}", exc_info=True)
        else:
            update.update(
                device_type=ua.device_type,
                browser=ua.browser,
                browser_version=ua.browser_version,
                os=ua.os,
                os_version=ua.os_version,
                is_bot=ua.is_bot,
            )

        return event.model_copy(update=update)

    async def _write(self, event: VisitEvent) -> None:
        try:
            await self.log_file.write(event.to_json_line())
            await self.log_file.flush()
        except (ValueError, OSError) as e:
            logger.error(f"Failed to write visit for {event.slug}: {e}", exc_info=True)
            return
        self._written += 1
