"""
logging.Handler that forwards records to a CloudWatchTransport

Typical usage:
    import logging
    from cloudwatch_transport import CloudWatchHandler

    logging.getLogger().addHandler(
        CloudWatchHandler(log_group_name='/app/production', log_stream_name='web-1')
    )
    logging.getLogger(__name__).info("order placed", extra={'order_id': 17})
"""

import logging
from typing import Any, Dict, Optional

from .transport import CloudWatchTransport

# Loggers whose records are never forwarded: the transport's own diagnostics
# and the AWS SDK it calls while uploading
IGNORED_LOGGER_PREFIXES = ('cloudwatch_transport', 'boto3', 'botocore', 'urllib3', 's3transfer')

# Attributes every LogRecord carries; anything else came from `extra=`
_STANDARD_ATTRIBUTES = frozenset(
    logging.LogRecord('', logging.INFO, '', 0, '', (), None).__dict__
) | {'message', 'asctime', 'taskName'}


def extract_meta(record: logging.LogRecord) -> Dict[str, Any]:
    """Collect the `extra` attributes of a record, plus exception text when present"""
    meta = {
        key: value for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRIBUTES and not key.startswith('_')
    }
    if record.exc_info:
        meta['exc_info'] = logging.Formatter().formatException(record.exc_info)
    elif record.exc_text:
        meta['exc_info'] = record.exc_text
    return meta


class CloudWatchHandler(logging.Handler):
    """
    Adapts the standard logging pipeline to a CloudWatchTransport

    The handler either wraps an existing transport, or builds and owns one
    from keyword options. An owned transport is closed with the handler.
    """

    def __init__(self, transport: Optional[CloudWatchTransport] = None, level=logging.NOTSET, **options):
        super().__init__(level)
        if transport is None:
            transport = CloudWatchTransport(**options)
            self._owns_transport = True
        else:
            self._owns_transport = False
        self.transport = transport

    def filter(self, record: logging.LogRecord):
        if record.name.startswith(IGNORED_LOGGER_PREFIXES):
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.transport.log(record.levelname.lower(), record.getMessage(), extract_meta(record))
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.transport.flush()

    def close(self) -> None:
        try:
            if self._owns_transport:
                self.transport.close()
        finally:
            super().close()
