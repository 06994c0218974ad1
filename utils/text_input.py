"""Sanitise free text for `adb shell input text`."""

from __future__ import annotations

# Characters the device shell would treat as syntax.
_SHELL_SPECIAL = frozenset('&|<>();"\\')
_DROPPED = frozenset('\r\n')


def encode_input_text(text: str) -> str:
    """Map each character independently, left to right.

    Spaces become ``%s`` (the input command's space token), shell syntax
    characters become ``_``, line breaks are dropped and everything else,
    non-ASCII included, passes through. This is not general shell quoting.
    """
    parts = []
    for ch in text:
        if ch == ' ':
            parts.append('%s')
        elif ch in _SHELL_SPECIAL:
            parts.append('_')
        elif ch in _DROPPED:
            continue
        else:
            parts.append(ch)
    return ''.join(parts)


__all__ = ['encode_input_text']
