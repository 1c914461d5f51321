"""Clean-up applied to every generated completion before it is used."""

from __future__ import annotations

import re


_FENCE_PATTERN = re.compile(r"```[a-zA-Z]*")


def clean_completion(text: str) -> str:
    """Drop markdown code fences (``` or ```html) and surrounding whitespace."""

    return _FENCE_PATTERN.sub("", text).strip()
