import math
import re
from typing import Any, List, Optional

from candidate_eval.models.models import Criterion

MAX_LABEL_LENGTH = 100
MAX_PRESET_CRITERIA = 12
MAX_CUSTOM_CRITERIA = 5
DEFAULT_WEIGHT = 3

WEIGHT_TIERS = {
    1: "reference only",
    2: "slightly emphasized",
    3: "standard",
    4: "emphasized",
    5: "top priority",
}

DEFAULT_EVALUATION_POINTS = [
    "Match with the required skills and experience",
    "Presence of the preferred skills and experience",
    "Relevance of past roles and industry experience",
    "Fit between the applicant's strengths and the position",
]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_weight(raw: Any) -> int:
    """Turn a loosely typed weight into an int in [1, 5]; unusable values become 3."""
    weight = DEFAULT_WEIGHT
    if isinstance(raw, bool) or raw is None:
        pass
    elif isinstance(raw, int):
        weight = raw
    elif isinstance(raw, float):
        if math.isfinite(raw):
            weight = int(raw)
    elif isinstance(raw, str):
        m = _LEADING_INT.match(raw)
        if m:
            weight = int(m.group(1))
    return max(1, min(5, weight))


def parse_criterion(raw: Any) -> Optional[Criterion]:
    if not isinstance(raw, dict):
        return None
    label = raw.get("label")
    if not isinstance(label, str) or len(label) > MAX_LABEL_LENGTH:
        return None
    return Criterion(label=label.strip(), weight=coerce_weight(raw.get("weight")))


def sanitize_criteria(entries: Any, limit: int) -> List[Criterion]:
    if not isinstance(entries, list):
        return []
    parsed = [parse_criterion(e) for e in entries]
    return [c for c in parsed if c is not None][:limit]


def collect_criteria(criteria: Any) -> List[Criterion]:
    """Preset entries first, then custom ones, each list capped after filtering."""
    if not isinstance(criteria, dict):
        return []
    return (
        sanitize_criteria(criteria.get("preset"), MAX_PRESET_CRITERIA)
        + sanitize_criteria(criteria.get("custom"), MAX_CUSTOM_CRITERIA)
    )


def rank_criteria(criteria: Any) -> str:
    ranked = sorted(collect_criteria(criteria), key=lambda c: c.weight, reverse=True)
    if not ranked:
        return "\n".join(f"{i}. {point}" for i, point in enumerate(DEFAULT_EVALUATION_POINTS, start=1))
    return "\n".join(
        f"{i}. {c.label} (importance: {WEIGHT_TIERS[c.weight]})"
        for i, c in enumerate(ranked, start=1)
    )
