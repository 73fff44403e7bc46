"""
Normalization of completion-service replies into `InsightResult`.

The service is asked for ``{"summary": ..., "themes": [{"title", "description"}]}``
but older prompts produced plain string themes, and models do not always follow
instructions. Anything that parses as JSON is coerced into a well-formed
result; only text that is not JSON at all is an error.
"""

import json
import logging
from typing import Any, List

from pydantic import BaseModel

from .errors import MalformedResponse


logger = logging.getLogger(__name__)


class Theme(BaseModel):
    title: str
    description: str = ""


class InsightResult(BaseModel):
    summary: str = ""
    themes: List[Theme] = []


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def coerce_theme(item: Any) -> Theme:
    """
    Coerce one element of ``themes`` into a `Theme`.

    Priority: an object carrying a ``title`` wins; otherwise the element's own
    text form becomes the title (plain strings as-is, anything else as JSON).
    """
    if isinstance(item, dict) and "title" in item:
        description = item.get("description")
        return Theme(
            title=_as_text(item["title"]),
            description="" if description is None else _as_text(description),
        )
    return Theme(title=_as_text(item))


def normalize_insights(raw_text: str) -> InsightResult:
    try:
        parsed = json.loads(raw_text)
    except (TypeError, ValueError, RecursionError) as exc:
        logger.warning("Completion reply is not valid JSON (%d chars)", len(raw_text or ""))
        raise MalformedResponse() from exc

    if not isinstance(parsed, dict):
        logger.warning("Completion reply is JSON but not an object: %s", type(parsed).__name__)
        parsed = {}

    summary = parsed.get("summary")
    themes = parsed.get("themes")
    if not isinstance(themes, list):
        themes = []

    return InsightResult(
        summary="" if summary is None else _as_text(summary),
        themes=[coerce_theme(item) for item in themes],
    )
