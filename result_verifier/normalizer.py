"""
Identifier and name normalization.

OCR output and registry entries disagree on case, spacing and punctuation
("4MW-22-CS-145" vs "4MW22CS145"). Both sides go through normalize() before
any comparison; normalizing only one side is a bug.
"""

from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def normalize(value: str | None) -> str:
    """Keep only ASCII letters and digits, lower-cased. None or "" → ""."""
    if not value:
        return ""
    return _NON_ALNUM.sub("", value).lower().strip()
