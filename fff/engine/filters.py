"""Pure save/skip classification of fetch outcomes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..config import FetchConfig
from .fetcher import FetchOutcome, FetchSuccess, Headers

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")
_HTML_TAG = re.compile(rb"<html", re.IGNORECASE)


class SaveReason(str, Enum):
    """Why a response was or was not saved."""

    TRANSPORT_ERROR = "transport_error"
    SAVE_ALL = "save_all"
    STATUS_MATCH = "status_match"
    BODY_MATCH = "body_match"
    NO_MATCH = "no_match"
    IGNORED_HTML = "ignored_html"
    IGNORED_EMPTY = "ignored_empty"


@dataclass(frozen=True, slots=True)
class SaveDecision:
    save: bool
    reason: SaveReason

    def __bool__(self) -> bool:
        return self.save


def is_html(headers: Headers, body: bytes) -> bool:
    """Detect HTML from the content type or an ``<html`` tag in the body."""

    for name, value in headers:
        if name.lower() != "content-type":
            continue
        if value.split(";", 1)[0].strip().lower() in HTML_CONTENT_TYPES:
            return True
    return _HTML_TAG.search(body) is not None


def is_empty(body: bytes) -> bool:
    return len(body) == 0


def _positive_reason(outcome: FetchSuccess, config: FetchConfig) -> SaveReason | None:
    if config.save_all:
        return SaveReason.SAVE_ALL
    if outcome.status in config.save_status:
        return SaveReason.STATUS_MATCH
    if config.match_string is not None and config.match_string.encode("utf-8") in outcome.body:
        return SaveReason.BODY_MATCH
    return None


def should_save(outcome: FetchOutcome, config: FetchConfig) -> SaveDecision:
    """Decide whether ``outcome`` is worth writing to disk.

    Positive rules (``save_all``, ``save_status``, ``match_string``) are OR-ed;
    the ignore rules are applied afterwards and can only veto a save.
    """

    if not isinstance(outcome, FetchSuccess):
        return SaveDecision(False, SaveReason.TRANSPORT_ERROR)
    reason = _positive_reason(outcome, config)
    if reason is None:
        return SaveDecision(False, SaveReason.NO_MATCH)
    if config.ignore_html and is_html(outcome.headers, outcome.body):
        return SaveDecision(False, SaveReason.IGNORED_HTML)
    if config.ignore_empty and is_empty(outcome.body):
        return SaveDecision(False, SaveReason.IGNORED_EMPTY)
    return SaveDecision(True, reason)


__all__ = ["SaveDecision", "SaveReason", "is_empty", "is_html", "should_save"]
