"""
Conversation turn and constraint DTOs.

A :class:`ConversationTurn` is what the caller submits to the clarification
state machine; constraints are rendered into the single ``constraints``
string the system contract expects.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
import re
from typing import Any, Dict, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Constraint:
    """A user-selected constraint such as ``tone`` or ``output-format``."""

    type: str
    description: str

    @property
    def type_label(self) -> str:
        """``output-format`` -> ``Output Format``."""
        return re.sub(r"\b\w", lambda m: m.group(0).upper(), self.type.replace("-", " "))

    def render(self) -> str:
        return f"{self.type_label}: {self.description}"


def format_constraints(constraints: Sequence[Constraint]) -> str:
    """Render constraints as ``"Type Label: description"`` joined by ``"; "``."""
    return "; ".join(c.render() for c in constraints or ())


@dataclass(frozen=True)
class ConversationTurn:
    """One submission to the clarification state machine.

    Attributes:
        rough_prompt: The user's unrefined prompt.
        constraints: Selected constraints.
        prompt_type: Prompt type id (``"none"`` for general refinement).
        learning_mode: Request grading and a learning report.
        prior_clarification_answers: Answers accumulated from earlier rounds.
    """

    rough_prompt: str
    constraints: Tuple[Constraint, ...] = field(default_factory=tuple)
    prompt_type: str = "none"
    learning_mode: bool = False
    prior_clarification_answers: Optional[Dict[str, Any]] = None

    @property
    def constraints_text(self) -> str:
        return format_constraints(self.constraints)

    def with_answers(self, answers: Dict[str, Any]) -> "ConversationTurn":
        """Return a copy carrying ``answers`` as the prior clarification answers."""
        return replace(self, prior_clarification_answers=dict(answers))


__all__ = ["Constraint", "ConversationTurn", "format_constraints"]
