"""
Exception classes for the CloudWatch transport
"""


class CloudWatchTransportError(Exception):
    """Base class for errors raised by the transport itself"""
    pass


class TransportClosedError(CloudWatchTransportError):
    """Raised when logging through a transport that has been closed"""
    pass
