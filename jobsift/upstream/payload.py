"""Response shape resolution.

The upstream body is classified once into a tagged union and then resolved
into a list of raw records:

  1. list                                    -> JsonPayload (used directly)
  2. dict with a list under a known key      -> JsonPayload
  3. dict wrapping markup                    -> HtmlPayload
  4. str / bytes                             -> HtmlPayload
  5. anything else                           -> UnknownPayload (no records)

Resolution never raises; an unrecognized shape is an empty result.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from jobsift.upstream.parser import HtmlCardExtractor

logger = logging.getLogger(__name__)

# Keys that may hold the record list, in priority order.
LIST_KEYS: tuple[str, ...] = (
    "elements",
    "jobs",
    "results",
    "data",
    "items",
    "jobPostings",
    "included",
)

# Keys that may hold a markup string when the object wraps HTML.
MARKUP_KEYS: tuple[str, ...] = ("html", "body", "content", "markup")

MARKUP_OPENING = "<"


@dataclass(frozen=True)
class JsonPayload:
    records: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class HtmlPayload:
    text: str = ""


@dataclass(frozen=True)
class UnknownPayload:
    kind: str = ""


RawPayload = JsonPayload | HtmlPayload | UnknownPayload


def classify_payload(value: Any) -> RawPayload:
    """Classify an upstream body of unknown shape."""
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, str):
        return HtmlPayload(value)
    if isinstance(value, Sequence):
        return JsonPayload(list(value))
    if isinstance(value, Mapping):
        for key in LIST_KEYS:
            candidate = value.get(key)
            if isinstance(candidate, list):
                logger.debug("Using record list under key '%s'", key)
                return JsonPayload(candidate)
        markup = _wrapped_markup(value)
        if markup is not None:
            return HtmlPayload(markup)
        return UnknownPayload(kind="object")
    return UnknownPayload(kind=type(value).__name__)


def _wrapped_markup(value: Mapping[Any, Any]) -> str | None:
    """Return the markup string an object wraps, if its text starts with '<'."""
    for key in MARKUP_KEYS:
        text = value.get(key)
        if isinstance(text, str) and text.lstrip().startswith(MARKUP_OPENING):
            return text
    for text in value.values():
        if isinstance(text, str) and text.lstrip().startswith(MARKUP_OPENING):
            return text
    return None


def resolve_records(
    payload: RawPayload,
    extractor: HtmlCardExtractor | None = None,
) -> list[dict[str, Any]]:
    """Turn a classified payload into raw records. Never raises."""
    if isinstance(payload, JsonPayload):
        records = [dict(r) for r in payload.records if isinstance(r, Mapping)]
        skipped = len(payload.records) - len(records)
        if skipped:
            logger.debug("Dropped %d non-object entries from record list", skipped)
        return records
    if isinstance(payload, HtmlPayload):
        extractor = extractor or HtmlCardExtractor()
        try:
            return extractor.extract(payload.text)
        except Exception:
            logger.warning("HTML extraction failed, treating as empty", exc_info=True)
            return []
    logger.debug("Unrecognized payload shape '%s', no records", payload.kind)
    return []


def resolve_body(
    value: Any,
    extractor: HtmlCardExtractor | None = None,
) -> list[dict[str, Any]]:
    """Classify and resolve an upstream body in one step."""
    return resolve_records(classify_payload(value), extractor)
