"""
LearningReport DTO.

Grading feedback returned when learning mode is enabled. Every score uses a
0-100 scale; the overall score is the mean of the six category scores as
computed by the model (it is carried, not recomputed).
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

Score = Annotated[float, Field(ge=0, le=100)]


class CategoryScores(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    clarity_specificity: Score
    context_completeness: Score
    constraints_success_criteria: Score
    input_output_definition: Score
    ambiguity_assumptions: Score
    testability: Score


class Weakness(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    issue: str
    example: str = ""
    fix: str = ""


class LearningReport(BaseModel):
    """Prompt grading report.

    Attributes:
        overall_score: 0-100 mean of the category scores.
        total_score: Optional raw sum reported by some models.
        overall_justification: Short sentence explaining the score.
        category_scores: Six 0-100 category scores.
        top_weaknesses: Up to three weaknesses with an example and a fix.
        strengths: What the prompt does well.
        actionable_suggestions: Short improvement hints.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    overall_score: Score
    total_score: Optional[float] = None
    overall_justification: str = ""
    category_scores: CategoryScores
    top_weaknesses: List[Weakness] = Field(default_factory=list, max_length=3)
    strengths: List[str] = Field(default_factory=list)
    actionable_suggestions: List[str] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


__all__ = ["CategoryScores", "Weakness", "LearningReport"]
