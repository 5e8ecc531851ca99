"""
CloudWatch transport: the entry point a logging framework calls per record
"""

import logging
import sys
import threading
from typing import Any, Callable, Dict, Mapping, Optional, Union

import boto3

from .buffer import EventBuffer
from .exceptions import TransportClosedError
from .formatter import Formatter
from .models.config import TransportConfig
from .models.event import LogEvent
from .services.cloudwatch import CloudWatchIntegration
from .uploader import BatchUploader, FlushTimer, UploadFunction

logger = logging.getLogger(__name__)


class CloudWatchTransport:
    """
    Buffers formatted log events and ships them to CloudWatch Logs on a timer

    Example:
        transport = CloudWatchTransport(
            log_group_name='/app/production',
            log_stream_name='web-1',
            region='eu-west-1',
            json_message=True
        )
        transport.log('info', 'user signed in', {'user_id': 42})
        transport.close()
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        *,
        upload: Optional[UploadFunction] = None,
        client_factory: Optional[Callable[..., Any]] = None,
        autostart: bool = True,
        **options
    ):
        """
        Initialize the transport

        Args:
            config: Validated configuration; built from options when omitted
            upload: Function delivering one batch, defaults to CloudWatchIntegration.upload
            client_factory: Builds the logs client, defaults to boto3.client
            autostart: Start the background flush timer immediately
            **options: TransportConfig fields
        """
        if config is None:
            config = TransportConfig(**options)
        elif options:
            config = TransportConfig(**{**config.model_dump(), **options})
        self.config = config

        if client_factory is None:
            client_factory = boto3.client
        self.logs_client = client_factory('logs', **config.client_options())

        if upload is None:
            upload = CloudWatchIntegration(
                create_log_group=config.create_log_group,
                create_log_stream=config.create_log_stream
            ).upload

        self.formatter = Formatter(config)
        self.buffer = EventBuffer()
        self.uploader = BatchUploader(
            self.buffer,
            self.logs_client,
            config.log_group_name,
            config.log_stream_name,
            upload=upload,
            on_error=self.handle_error,
            max_batch_size=config.max_batch_size
        )
        self._timer: Optional[FlushTimer] = None
        self._lock = threading.Lock()
        self._closed = False

        if autostart:
            self.start()

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Start the background flush timer if it is not running"""
        with self._lock:
            if self._closed:
                raise TransportClosedError("Cannot start a closed transport")
            if self._timer is None:
                self._timer = FlushTimer(
                    self.config.flush_interval,
                    self.uploader.flush,
                    pending=lambda: len(self.buffer) > 0
                )
                self._timer.start()
                if len(self.buffer):
                    self._timer.notify()
                logger.debug(f"Started flush timer for {self.config.log_group_name}/{self.config.log_stream_name} "
                             f"every {self.config.flush_interval}s")

    def log(
        self,
        level: str,
        message: str,
        meta: Optional[Dict[str, Any]] = None,
        callback: Optional[Callable[[], Any]] = None
    ) -> None:
        """
        Format a record and queue it for the next flush

        Errors raised by a custom message formatter propagate to the caller.
        """
        text = self.formatter.format(level, message, meta)
        self.add(LogEvent(message=text))
        if callback is not None:
            callback()

    def add(self, event: Union[LogEvent, Mapping[str, Any]]) -> None:
        """Queue a pre-built event"""
        event = LogEvent.coerce(event)
        with self._lock:
            if self._closed:
                raise TransportClosedError("Transport is closed")
            self.buffer.append(event)
            if self._timer is not None:
                self._timer.notify()

    def flush(self) -> bool:
        """Upload one batch now, outside the timer schedule"""
        return self.uploader.flush()

    def handle_error(self, error: Any) -> None:
        """Route an upload failure to the error handler, or stderr when none is configured"""
        if self.config.error_handler is not None:
            self.config.error_handler(error)
        else:
            print(error, file=sys.stderr)

    def close(self, timeout: Optional[float] = None) -> None:
        """Stop the flush timer and upload everything still buffered"""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            timer, self._timer = self._timer, None

        if timer is not None:
            timer.stop(timeout)
        batches = self.uploader.drain()
        logger.debug(f"Transport closed after draining {batches} batches")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
