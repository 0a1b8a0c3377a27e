"""
Cleanup pass for raw completions.

Hosted models often prepend a label ("Improved Bullet:") or wrap the answer
in quotes even when told not to. ``normalize`` removes that chatter and
leaves everything else untouched.
"""

from __future__ import annotations

# Tried in order; only the first match is stripped per pass.
KNOWN_PREFIXES = (
    "Improved Resume Bullet:",
    "Improved Bullet:",
    "Improved:",
    "Resume Bullet:",
    "Bullet:",
    "Output:",
    "Result:",
)

QUOTE_CHARS = "\"'“”‘’"


def _strip_prefix(text: str) -> str:
    for prefix in KNOWN_PREFIXES:
        if text[:len(prefix)].lower() == prefix.lower():
            return text[len(prefix):]
    return text


def _is_edge_punctuation(ch: str) -> bool:
    return ch in ":-" or ch.isspace()


def _strip_edge_punctuation(text: str) -> str:
    start, end = 0, len(text)
    while start < end and _is_edge_punctuation(text[start]):
        start += 1
    while end > start and _is_edge_punctuation(text[end - 1]):
        end -= 1
    return text[start:end]


def _single_pass(text: str) -> str:
    text = text.strip()
    text = _strip_prefix(text).strip()
    text = text.strip(QUOTE_CHARS)
    text = _strip_edge_punctuation(text)
    return text.strip()


def normalize(raw_text: str) -> str:
    """Return ``raw_text`` without leading labels, wrapping quotes or dash/colon runs.

    Total over all inputs and idempotent: the single pass is repeated until the
    text stops changing, so quotes or labels exposed by an earlier pass are
    removed as well. Every pass only removes characters, so this terminates.
    """
    text = raw_text or ""
    while True:
        cleaned = _single_pass(text)
        if cleaned == text:
            return cleaned
        text = cleaned
