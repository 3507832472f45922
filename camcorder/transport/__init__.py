"""
Transport layer for launching and controlling processes.

Provides abstraction for:
- Background command launch
- Signal delivery
- Process table reads
"""

from camcorder.transport.base import Transport, NullTransport, SignalKind, ProcessEntry
from camcorder.transport.local import LocalTransport, signal_number

__all__ = [
    "Transport",
    "NullTransport",
    "SignalKind",
    "ProcessEntry",
    "LocalTransport",
    "signal_number",
]
