"""
CRP evidence scoring.

Responses arrive from the observation form as loosely typed values
(``"4"``, ``3``, ``"not-observed"``, ``["a", "b"]``, free text). They are
parsed into a small tagged union before any arithmetic happens, so the
calculator only ever counts real numeric ratings.
"""
from __future__ import annotations

import math
from fractions import Fraction
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, Field

NOT_OBSERVED = "not-observed"

# Ratings at or above this value count as evidence ("clearly/possibly observed").
EVIDENCE_THRESHOLD = 3


class NumericRating(BaseModel):
    kind: Literal["numeric"] = "numeric"
    value: float


class NotObserved(BaseModel):
    kind: Literal["not-observed"] = "not-observed"


class TextAnswer(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class MultiSelectAnswer(BaseModel):
    kind: Literal["multiselect"] = "multiselect"
    choices: list[str]


ResponseValue = Annotated[
    Union[NumericRating, NotObserved, TextAnswer, MultiSelectAnswer],
    Field(discriminator="kind"),
]


def _unwrap(raw: Any) -> Any:
    # ObservationResponse objects / dicts carry the answer under "value"
    if isinstance(raw, Mapping) and "value" in raw:
        return raw["value"]
    if hasattr(raw, "question_id") and hasattr(raw, "value"):
        return raw.value
    return raw


def parse_response_value(raw: Any) -> NumericRating | NotObserved | TextAnswer | MultiSelectAnswer:
    value = _unwrap(raw)

    if isinstance(value, (NumericRating, NotObserved, TextAnswer, MultiSelectAnswer)):
        return value

    if value is None:
        return TextAnswer(text="")

    if isinstance(value, bool):
        return TextAnswer(text="yes" if value else "no")

    if isinstance(value, (list, tuple, set)):
        return MultiSelectAnswer(choices=[str(v) for v in value])

    if isinstance(value, (int, float)):
        if math.isfinite(value):
            return NumericRating(value=float(value))
        return TextAnswer(text=str(value))

    s = str(value).strip()
    if s == NOT_OBSERVED:
        return NotObserved()
    if not s:
        return TextAnswer(text="")

    try:
        x = float(s)
    except ValueError:
        return TextAnswer(text=s)

    if not math.isfinite(x):
        return TextAnswer(text=s)
    return NumericRating(value=x)


def round_half_up(value: float | Fraction, places: int = 0) -> int | float:
    """
    Round half up (ties go toward positive infinity), like Math.round on the
    client.
    round_half_up(2.5) == 3, round_half_up(-2.5) == -2, round_half_up(4.94, 1) == 4.9
    """
    scale = 10 ** places
    rounded = math.floor(Fraction(value) * scale + Fraction(1, 2))
    if places == 0:
        return int(rounded)
    return rounded / scale


def numeric_ratings(responses: Mapping[str, Any]) -> list[float]:
    """Valid ratings only: not-observed, blanks and non-numbers are dropped."""
    out: list[float] = []
    for raw in responses.values():
        parsed = parse_response_value(raw)
        if isinstance(parsed, NumericRating):
            out.append(parsed.value)
    return out


def calculate_crp_evidence(responses: Mapping[str, Any]) -> int:
    """
    Percentage (0-100) of valid ratings that are >= 3.
    Returns 0 when there is no valid rating at all.
    """
    ratings = numeric_ratings(responses)
    if not ratings:
        return 0

    evidence = sum(1 for r in ratings if r >= EVIDENCE_THRESHOLD)
    return round_half_up(Fraction(evidence * 100, len(ratings)))


def count_look_fors(responses: Mapping[str, Any]) -> int:
    return len(responses)
