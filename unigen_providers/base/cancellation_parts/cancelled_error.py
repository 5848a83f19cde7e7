"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
in generation calls. Kept isolated to satisfy one-class-per-file policy.

Note: this is deliberately not ``asyncio.CancelledError``. Task cancellation
is an internal mechanism; callers receive this type so a stopped lane can be
told apart from a network or vendor fault.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    This specialized error distinguishes cooperative cancellation from other
    runtime failures, enabling targeted handling (e.g., suppress log noise,
    map to a "stopped" status, or avoid retry logic).
    """

__all__ = ["CancelledError"]
