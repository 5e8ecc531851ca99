"""
Batching transport that ships log records to AWS CloudWatch Logs
"""

from .exceptions import CloudWatchTransportError, TransportClosedError
from .formatter import Formatter, LogRecord, format_message
from .handler import CloudWatchHandler
from .models import LogEvent, TransportConfig
from .transport import CloudWatchTransport

__all__ = [
    'CloudWatchTransport',
    'CloudWatchHandler',
    'TransportConfig',
    'LogEvent',
    'LogRecord',
    'Formatter',
    'format_message',
    'CloudWatchTransportError',
    'TransportClosedError',
]
