"""
Batch uploader and the timer that drives it
"""

import logging
import threading
from typing import Any, Callable, List, Optional

from .buffer import EventBuffer
from .models.config import DEFAULT_MAX_BATCH_SIZE
from .models.event import LogEvent

logger = logging.getLogger(__name__)

UploadCallback = Callable[[Optional[Any]], None]
UploadFunction = Callable[[Any, str, str, List[LogEvent], UploadCallback], None]


class BatchUploader:
    """
    Drains the event buffer one bounded batch at a time

    A batch is removed from the buffer before it is handed to the upload
    function and is not put back if the upload fails: delivery is at most
    once per flush attempt. Failures are routed to on_error.
    """

    def __init__(
        self,
        buffer: EventBuffer,
        client: Any,
        log_group_name: str,
        log_stream_name: str,
        upload: UploadFunction,
        on_error: Callable[[Any], None],
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    ):
        self.buffer = buffer
        self.client = client
        self.log_group_name = log_group_name
        self.log_stream_name = log_stream_name
        self.upload = upload
        self.on_error = on_error
        self.max_batch_size = max_batch_size
        self._flush_lock = threading.Lock()

    def flush(self) -> bool:
        """
        Upload one batch from the buffer

        Returns:
            True if a batch was handed to the upload function, False if the buffer was empty
        """
        with self._flush_lock:
            batch = self.buffer.take_batch(self.max_batch_size)
            if not batch:
                return False

            completed = threading.Event()

            def callback(error=None):
                if completed.is_set():
                    logger.warning("Upload callback invoked more than once, ignoring")
                    return
                completed.set()
                if error is not None:
                    self.on_error(error)

            logger.debug(f"Uploading {len(batch)} events to {self.log_group_name}/{self.log_stream_name}")
            try:
                self.upload(self.client, self.log_group_name, self.log_stream_name, batch, callback)
            except Exception as e:
                if completed.is_set():
                    raise
                callback(e)
            return True

    def drain(self) -> int:
        """
        Flush until the buffer is empty

        Returns:
            Number of batches handed to the upload function
        """
        batches = 0
        while self.flush():
            batches += 1
        return batches


class FlushTimer(threading.Thread):
    """
    Daemon thread that flushes once every interval while events are pending

    The countdown starts when notify() reports a pending event, so no flush
    happens sooner than interval seconds after the buffer became non-empty.
    While pending() stays true after a flush, the next countdown starts at once.
    """

    def __init__(
        self,
        interval: float,
        flush: Callable[[], Any],
        pending: Optional[Callable[[], bool]] = None,
        name: str = 'cloudwatch-flush'
    ):
        super().__init__(name=name, daemon=True)
        self.interval = interval
        self._flush = flush
        self._pending = pending
        self._work = threading.Event()
        self._stopped = threading.Event()

    def notify(self) -> None:
        """Report that an event was queued"""
        self._work.set()

    def run(self) -> None:
        while True:
            self._work.wait()
            if self._stopped.is_set() or self._stopped.wait(self.interval):
                return
            self._work.clear()
            try:
                self._flush()
            except Exception as e:
                logger.error(f"Scheduled flush failed: {str(e)}")
            if self._pending is not None and self._pending():
                self._work.set()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        self._work.set()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout)
