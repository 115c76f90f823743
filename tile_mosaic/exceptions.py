"""Exceptions raised by the mosaic engine."""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for fatal mosaic-run failures."""


class EmptyDatabaseError(MosaicError):
    """The tile library produced no usable tiles."""


class TargetNotFoundError(MosaicError, FileNotFoundError):
    """The target image does not exist."""
