"""
Data models for the CloudWatch transport
"""

from .config import TransportConfig
from .event import LogEvent

__all__ = ['TransportConfig', 'LogEvent']
