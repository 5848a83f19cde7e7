"""Deep-scan text fallback for unrecognized response shapes.

Some OpenAI-compatible proxies return bodies that match none of the known
shapes. ``collect_deep_text`` walks an arbitrary JSON tree and keeps string
leaves that plausibly carry model output: long enough, not under a metadata
key and not identifier-shaped (hex/UUID runs without spaces).
"""
from __future__ import annotations

import re
from typing import AbstractSet, Any, List, Optional

from ...config.defaults import DEEP_SCAN_IGNORE_KEYS, DEEP_SCAN_MIN_LENGTH

_IDENTIFIER_RE = re.compile(r"^[0-9a-f\-]{6,}$")


def collect_deep_text(
    obj: Any,
    *,
    min_length: int = DEEP_SCAN_MIN_LENGTH,
    ignore_keys: AbstractSet[str] = DEEP_SCAN_IGNORE_KEYS,
) -> str:
    """Return plausible text leaves of ``obj`` joined by newlines.

    Parameters:
        obj: Decoded JSON value (dict, list, str, ...).
        min_length: Minimum stripped length for a string leaf to count.
        ignore_keys: Keys (compared case-insensitively) whose string values
            are skipped. Lists inherit the key of their parent.

    Returns:
        Unique leaves in document order joined with ``"\\n"``; ``""`` when
        nothing qualifies.
    """
    ignored = {k.lower() for k in ignore_keys}
    pieces: List[str] = []

    def _walk(value: Any, key: Optional[str]) -> None:
        if not value:
            return
        if isinstance(value, str):
            text = value.strip()
            if len(text) < min_length:
                return
            if key is not None and key.lower() in ignored:
                return
            if _IDENTIFIER_RE.match(text) and " " not in text:
                return
            if text not in pieces:
                pieces.append(text)
            return
        if isinstance(value, list):
            for item in value:
                _walk(item, key)
            return
        if isinstance(value, dict):
            for k, v in value.items():
                _walk(v, str(k))

    _walk(obj, None)
    return "\n".join(pieces)


__all__ = ["collect_deep_text"]
