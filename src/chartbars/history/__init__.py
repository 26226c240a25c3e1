"""Daily history providers consumed by the aggregator."""

from .base import StockHistory
from .frame_history import FrameHistory
from .sequence_history import SequenceHistory

__all__ = ["FrameHistory", "SequenceHistory", "StockHistory"]
