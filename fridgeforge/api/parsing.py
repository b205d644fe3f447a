"""Helpers for decoding JSON produced by language models."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code-fence markup around a JSON document."""

    return _FENCE_RE.sub("", text).strip()


def loads_with_cleanup(text: str) -> Any:
    """Parse ``text`` as JSON, retrying once without code fences.

    Raises :class:`json.JSONDecodeError` when the cleaned text is still invalid.
    """

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("JSON parse failed, attempting cleanup: %s", exc)
    return json.loads(strip_code_fences(text))
