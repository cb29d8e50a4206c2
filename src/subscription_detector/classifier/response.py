"""Normalization of raw classifier responses into a SubscriptionPatch."""

from __future__ import annotations

import json
import math
import re
from typing import Any

import structlog

from subscription_detector.extraction.dates import parse_date_or_none
from subscription_detector.models import SubscriptionCategory, SubscriptionCycle, SubscriptionPatch

logger = structlog.get_logger()

_JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*\})\s*```", re.S)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.S)


def _extract_json(raw: str) -> Any:
    """Extract the JSON value from a raw model response.

    Strict JSON is tried first, then a fenced code block, then the first
    brace-delimited span.
    """

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    for pattern in (_JSON_BLOCK_RE, _JSON_OBJECT_RE):
        m = pattern.search(raw)
        if m:
            try:
                return json.loads(m.group(1) if m.groups() else m.group(0))
            except json.JSONDecodeError:
                continue

    raise ValueError("model response did not contain a JSON object")


def _normalize_enum(value: Any, enum_type: type) -> Any:
    if not isinstance(value, str):
        return None
    try:
        return enum_type(value.strip().lower())
    except ValueError:
        return None


def _positive_finite(number: float) -> bool:
    return math.isfinite(number) and number > 0


def _normalize_amount(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        m = re.search(r"-?\d+(?:\.\d+)?", value.replace(",", ""))
        if not m:
            return None
        number = float(m.group(0))
    else:
        return None
    return number if _positive_finite(number) else None


def _normalize_int(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not _positive_finite(number):
        return None
    return int(number) or None


def parse_classifier_response(raw: str | None) -> SubscriptionPatch | None:
    """Turn a raw model response into a SubscriptionPatch.

    Args:
        raw: Text content returned by the model.

    Returns:
        The patch, or None when the model answered `null`, returned no usable
        name, or returned nothing parseable. Fields with values outside the
        allowed vocabulary are dropped individually.
    """

    raw = (raw or "").strip()
    if not raw or raw.lower() == "null":
        return None

    try:
        data = _extract_json(raw)
    except ValueError as exc:
        logger.warning("classifier_response_unparseable", error=str(exc), raw=raw[:200])
        return None

    if not isinstance(data, dict):
        return None

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return None

    is_trial = data.get("is_trial")
    patch = SubscriptionPatch(
        name=name.strip(),
        amount=_normalize_amount(data.get("amount")),
        cycle=_normalize_enum(data.get("cycle"), SubscriptionCycle),
        start_date=parse_date_or_none(data.get("start_date")),
        is_trial=is_trial if isinstance(is_trial, bool) else None,
        trial_duration_in_days=_normalize_int(data.get("trial_duration_in_days")),
        trial_end_date=parse_date_or_none(data.get("trial_end_date")),
        category=_normalize_enum(data.get("category"), SubscriptionCategory),
    )
    return None if patch.is_empty() else patch
