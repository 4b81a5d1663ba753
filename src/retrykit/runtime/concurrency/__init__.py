"""Cancellation primitives for async drivers. Pure asyncio, no dependencies."""

from __future__ import annotations

from .task import checkpoint, shield, uninterruptible

__all__ = ["checkpoint", "shield", "uninterruptible"]
