"""
Message formatting for CloudWatch log events

Three strategies are supported, checked in this order:
    - JSON mode: {"level": ..., "msg": ..., "meta": ...}
    - custom formatter: any callable taking a LogRecord and returning a string
    - text mode: "<level> - <message> - <meta as JSON>"
"""

import json
from typing import Any, Callable, Dict, NamedTuple, Optional

from .models.config import TransportConfig


class LogRecord(NamedTuple):
    """Record handed to a custom message formatter"""
    level: str
    msg: str
    meta: Dict[str, Any]


def render_meta(meta: Optional[Dict[str, Any]]) -> str:
    """Pretty-print metadata with 2-space indentation, '{}' when there is none"""
    if not meta:
        return '{}'
    return json.dumps(meta, indent=2, ensure_ascii=False, default=str)


def format_message(
    level: str,
    message: str,
    meta: Optional[Dict[str, Any]] = None,
    json_message: bool = False,
    message_formatter: Optional[Callable[[LogRecord], str]] = None
) -> str:
    """
    Render one log record as a wire-ready string

    Args:
        level: Log level name
        message: Log message
        meta: Structured metadata attached to the record
        json_message: Render as a JSON object instead of text
        message_formatter: Custom formatter, used verbatim when json_message is off

    Returns:
        The formatted message
    """
    if meta is None:
        meta = {}

    if json_message:
        return json.dumps({'level': level, 'msg': message, 'meta': meta}, ensure_ascii=False, default=str)

    if message_formatter is not None:
        return message_formatter(LogRecord(level=level, msg=message, meta=meta))

    return f"{level} - {message} - {render_meta(meta)}"


class Formatter:
    """Formatting strategy bound to a transport configuration"""

    def __init__(self, config: TransportConfig):
        self.json_message = config.json_message
        self.message_formatter = config.message_formatter

    def format(self, level: str, message: str, meta: Optional[Dict[str, Any]] = None) -> str:
        return format_message(
            level,
            message,
            meta,
            json_message=self.json_message,
            message_formatter=self.message_formatter
        )
