"""Logging helpers."""

from .event_sink import JsonlEventSink, load_events
from .logger import HumanLogger

__all__ = ["HumanLogger", "JsonlEventSink", "load_events"]
