"""Best-effort parsing of agent output.

Agents are asked for JSON but routinely wrap it in prose or markdown fences.
``ResponseExtractor`` never raises: it walks a cascade of strategies and, when
none applies, wraps the raw text as ``{"result": text}``.
``scrape_labeled_list`` is the line-based backstop for fields a record lacks.
"""

import json
import logging
import re
from typing import Any, Callable

logger = logging.getLogger(__name__)

PARSE_FAILED = "parse failed"
MAX_SCRAPED_ITEMS = 4

_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```")
_ANY_FENCE = re.compile(r"```([\s\S]*?)```")
_BULLET = re.compile(r"^[-•*]\s*")

SpanLocator = Callable[[str], str | None]


def greedy_brace_span(text: str) -> str | None:
    """Return the text from the first ``{`` to the last ``}``.

    Not brace-balanced: with several objects in the text the span covers all
    of them (and whatever sits between), which usually fails to parse.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start:end + 1]


def balanced_brace_span(text: str) -> str | None:
    """Return the first brace-balanced object span, skipping braces inside strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for pos in range(start, len(text)):
            char = text[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:pos + 1]
        start = text.find("{", start + 1)
    return None


def _loads(text: str) -> Any | None:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


class ResponseExtractor:
    """Turn raw agent text into a structured value using a strategy cascade.

    1. the whole text as JSON
    2. the first fenced block tagged ``json``
    3. the first fenced block of any kind
    4. the span chosen by ``span_locator`` (greedy first-``{`` to last-``}`` by default)
    5. ``{"result": raw}``
    """

    def __init__(self, span_locator: SpanLocator | None = None):
        self._span_locator = span_locator or greedy_brace_span
        self._strategies: list[tuple[str, Callable[[str], Any]]] = [
            ("direct", _loads),
            ("json_fence", self._from_json_fence),
            ("any_fence", self._from_any_fence),
            ("brace_span", self._from_brace_span),
        ]

    def extract(self, raw: str) -> Any:
        if not isinstance(raw, str):
            logger.warning("Agent response is not text (%s)", type(raw).__name__)
            return {"error": PARSE_FAILED}

        for name, strategy in self._strategies:
            value = strategy(raw)
            if value is not None:
                logger.debug("Parsed agent response via %s strategy", name)
                return value

        logger.warning("Could not parse JSON from agent response: %s", raw[:200])
        return {"result": raw}

    @staticmethod
    def _from_json_fence(raw: str) -> Any | None:
        match = _JSON_FENCE.search(raw)
        return _loads(match.group(1)) if match else None

    @staticmethod
    def _from_any_fence(raw: str) -> Any | None:
        match = _ANY_FENCE.search(raw)
        return _loads(match.group(1)) if match else None

    def _from_brace_span(self, raw: str) -> Any | None:
        span = self._span_locator(raw)
        return _loads(span) if span else None


_default_extractor = ResponseExtractor()


def extract_record(raw: str) -> Any:
    """Parse ``raw`` with the default (greedy-span) extractor."""
    return _default_extractor.extract(raw)


def scrape_labeled_list(raw: str, label_prefix: str, limit: int = MAX_SCRAPED_ITEMS) -> list[str]:
    """Collect up to ``limit`` non-blank lines following the first line mentioning ``label_prefix``.

    Matching is case-insensitive substring containment. Each collected line
    loses one leading bullet (``-``, ``•`` or ``*``) and surrounding whitespace.
    Returns an empty list when no line matches.
    """
    if not isinstance(raw, str) or not raw:
        return []

    lines = raw.split("\n")
    needle = label_prefix.lower()
    for index, line in enumerate(lines):
        if needle in line.lower():
            break
    else:
        return []

    items: list[str] = []
    for line in lines[index + 1:]:
        stripped = line.strip()
        if not stripped:
            continue
        items.append(_BULLET.sub("", stripped, count=1).strip())
        if len(items) >= limit:
            break
    return items
