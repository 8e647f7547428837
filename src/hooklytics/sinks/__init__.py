"""Sinks - ready-made listeners that deliver batches somewhere."""

from .base import EventSink, SinkListener, sink_listener
from .console import ConsoleSink
from .file import FileSink
from .http import HttpSink
from .zmq import ZmqSink

__all__ = [
    "EventSink",
    "SinkListener",
    "sink_listener",
    "ConsoleSink",
    "FileSink",
    "HttpSink",
    "ZmqSink",
]
