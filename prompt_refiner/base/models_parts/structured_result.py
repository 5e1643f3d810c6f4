"""
StructuredResult: the tagged union every successful dispatch produces.

Models answer with one flat snake_case JSON object (the wire form). The wire
object is validated by :class:`StructuredResultWire`, which enforces that
exactly one shape is present, and then narrowed into one of three tagged
variants:

- :class:`NeedsClarification` - the model wants answers first.
- :class:`Excellent` - the prompt was graded as already excellent.
- :class:`Improved` - a refined prompt plus the assumptions made.

Each variant's ``to_wire()`` produces a payload that validates back into an
equal variant.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .clarification_item import ClarificationItem
from .learning_report import LearningReport


def _wire(
    *,
    clarifications: List[ClarificationItem] | None = None,
    improved_prompt: Optional[str] = None,
    is_already_excellent: bool = False,
    excellence_reason: Optional[str] = None,
    assumptions: List[str] | None = None,
    learning_report: Optional[LearningReport] = None,
) -> Dict[str, Any]:
    clar = [c.to_wire() for c in clarifications or []]
    return {
        "needs_clarification": bool(clar),
        "clarifications": clar,
        "improved_prompt": improved_prompt,
        "is_already_excellent": is_already_excellent,
        "excellence_reason": excellence_reason,
        "assumptions": list(assumptions or []),
        "learning_report": learning_report.to_wire() if learning_report else None,
    }


class NeedsClarification(BaseModel):
    """The model needs the listed questions answered before refining."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["needs_clarification"] = "needs_clarification"
    clarifications: List[ClarificationItem] = Field(min_length=1)

    def to_wire(self) -> Dict[str, Any]:
        return _wire(clarifications=self.clarifications)


class Excellent(BaseModel):
    """Grading verdict: the prompt is already excellent (learning mode only)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["excellent"] = "excellent"
    improved_prompt: str = Field(min_length=1)
    excellence_reason: str = Field(min_length=1)
    learning_report: LearningReport

    def to_wire(self) -> Dict[str, Any]:
        return _wire(
            improved_prompt=self.improved_prompt,
            is_already_excellent=True,
            excellence_reason=self.excellence_reason,
            learning_report=self.learning_report,
        )


class Improved(BaseModel):
    """A refined prompt with the assumptions the model made."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["improved"] = "improved"
    improved_prompt: str = Field(min_length=1)
    assumptions: List[str] = Field(default_factory=list)
    learning_report: Optional[LearningReport] = None

    def to_wire(self) -> Dict[str, Any]:
        return _wire(
            improved_prompt=self.improved_prompt,
            assumptions=self.assumptions,
            learning_report=self.learning_report,
        )


StructuredResult = Annotated[
    Union[NeedsClarification, Excellent, Improved],
    Field(discriminator="kind"),
]


class StructuredResultWire(BaseModel):
    """Flat wire form of a model reply.

    Validation rules (all raise ``ValueError`` wrapped in a pydantic
    ``ValidationError``):

    - exactly one of a non-empty ``improved_prompt`` and a non-empty
      ``clarifications`` list;
    - ``needs_clarification``, when present, agrees with which one it is;
    - ``is_already_excellent`` requires the improved prompt, a reason and a
      learning report.
    """

    model_config = ConfigDict(extra="ignore")

    needs_clarification: Optional[bool] = None
    clarifications: List[ClarificationItem] = Field(default_factory=list)
    improved_prompt: Optional[str] = None
    is_already_excellent: bool = False
    excellence_reason: Optional[str] = None
    assumptions: List[str] = Field(default_factory=list)
    learning_report: Optional[LearningReport] = None

    @model_validator(mode="before")
    @classmethod
    def _null_lists(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            for key in ("clarifications", "assumptions"):
                if data.get(key, ()) is None:
                    data[key] = []
            if data.get("is_already_excellent") is None:
                data.pop("is_already_excellent", None)
        return data

    @model_validator(mode="after")
    def _exactly_one_shape(self) -> "StructuredResultWire":
        has_prompt = bool(self.improved_prompt and self.improved_prompt.strip())
        has_clar = bool(self.clarifications)
        if has_prompt == has_clar:
            raise ValueError(
                "exactly one of improved_prompt or clarifications must be present"
            )
        if self.needs_clarification is not None and self.needs_clarification != has_clar:
            raise ValueError("needs_clarification disagrees with the payload shape")
        if self.is_already_excellent and not (
            has_prompt and self.excellence_reason and self.learning_report is not None
        ):
            raise ValueError(
                "is_already_excellent requires improved_prompt, excellence_reason and learning_report"
            )
        return self

    def to_result(self) -> Union[NeedsClarification, Excellent, Improved]:
        """Narrow the validated wire object into its tagged variant."""
        if self.clarifications:
            return NeedsClarification(clarifications=self.clarifications)
        assert self.improved_prompt is not None  # nosec B101 - guaranteed by validator
        if self.is_already_excellent:
            assert self.learning_report is not None  # nosec B101
            return Excellent(
                improved_prompt=self.improved_prompt,
                excellence_reason=self.excellence_reason or "",
                learning_report=self.learning_report,
            )
        return Improved(
            improved_prompt=self.improved_prompt,
            assumptions=self.assumptions,
            learning_report=self.learning_report,
        )


def result_from_wire(data: Any) -> Union[NeedsClarification, Excellent, Improved]:
    """Validate a wire payload and return its variant (raises ``ValidationError``)."""
    return StructuredResultWire.model_validate(data).to_result()


__all__ = [
    "NeedsClarification",
    "Excellent",
    "Improved",
    "StructuredResult",
    "StructuredResultWire",
    "result_from_wire",
]
