"""Prompt types: per-task guidance appended to the system instructions.

Built-in types ship with the package; callers may pass a mapping of custom
types (by id) which extends the catalog and may override a built-in's
guidance text.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class PromptType:
    """A named refinement focus.

    Attributes:
        id: Stable identifier (``"none"`` is the generic type).
        name: Display name used in the guidance header.
        description: One-line description for pickers.
        system_prompt: Guidance text; empty means no guidance.
        builtin: ``False`` for caller-supplied types.
    """

    id: str
    name: str
    description: str = ""
    system_prompt: str = ""
    builtin: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "system_prompt": self.system_prompt,
            "builtin": self.builtin,
        }


_FOCUS = "When refining this prompt:\n"

BUILTIN_PROMPT_TYPES: List[PromptType] = [
    PromptType(
        id="none",
        name="Generic",
        description="General-purpose prompt refinement with sensible defaults",
    ),
    PromptType(
        id="plan-architect",
        name="Plan / Architect",
        description="High-level system design, architecture decisions, and project planning",
        system_prompt=(
            "Focus on architectural decisions and system design. " + _FOCUS
            + "- Clarify the system scope and boundaries\n"
            "- Identify key components and their responsibilities\n"
            "- Consider scalability, maintainability, and performance\n"
            "- Suggest relevant design patterns or architectural styles\n"
            "- Include technology stack considerations if relevant"
        ),
    ),
    PromptType(
        id="research",
        name="Research",
        description="Information gathering, technology comparison, and learning exploration",
        system_prompt=(
            "Focus on research and information gathering. " + _FOCUS
            + "- Clarify what information or comparisons are needed\n"
            "- Identify criteria for evaluation if comparing options\n"
            "- Structure the prompt to guide comprehensive research\n"
            "- Include desired depth of analysis\n"
            "- Suggest reliable sources or methodology if relevant"
        ),
    ),
    PromptType(
        id="full-app-build",
        name="Full App Build",
        description="Complete application development from scratch with all components",
        system_prompt=(
            "Focus on complete application development. " + _FOCUS
            + "- Break down the application into clear components\n"
            "- Specify technology stack and framework preferences\n"
            "- Include architecture and file structure guidance\n"
            "- Consider authentication, data storage, and API needs\n"
            "- Clarify deployment and environment requirements"
        ),
    ),
    PromptType(
        id="update-refactor",
        name="Update / Refactor",
        description="Modifying existing code, improving structure, or adding features",
        system_prompt=(
            "Focus on code modifications and refactoring. " + _FOCUS
            + "- Identify what specific code or feature needs updating\n"
            "- Clarify the goals (performance, maintainability, new feature, etc.)\n"
            "- Preserve existing functionality and behavior\n"
            "- Consider backward compatibility if relevant\n"
            "- Include testing requirements for changes"
        ),
    ),
    PromptType(
        id="bug-investigation-fix",
        name="Bug Investigation & Fix",
        description="Debugging, error analysis, and implementing fixes",
        system_prompt=(
            "Focus on bug identification and resolution. " + _FOCUS
            + "- Clarify the specific symptoms and error messages\n"
            "- Include reproduction steps if available\n"
            "- Identify affected components or files\n"
            "- Consider root cause analysis approach\n"
            "- Include verification steps after the fix"
        ),
    ),
    PromptType(
        id="code-review",
        name="Code Review",
        description="Reviewing code quality, suggesting improvements, and best practices",
        system_prompt=(
            "Focus on code review and quality assessment. " + _FOCUS
            + "- Specify what aspects to review (security, performance, style, etc.)\n"
            "- Include relevant coding standards or style guides\n"
            "- Clarify if looking for specific issues or general feedback\n"
            "- Consider maintainability and readability\n"
            "- Suggest actionable improvements"
        ),
    ),
]


def all_prompt_types(custom: Optional[Mapping[str, Mapping[str, Any]]] = None) -> List[PromptType]:
    """Return built-ins merged with ``custom`` (matching ids update the built-in)."""
    types = {t.id: t for t in BUILTIN_PROMPT_TYPES}
    for type_id, raw in (custom or {}).items():
        existing = types.get(type_id)
        if existing is not None:
            types[type_id] = replace(
                existing,
                name=str(raw.get("name") or existing.name),
                description=str(raw.get("description") or existing.description),
                system_prompt=str(raw.get("system_prompt", raw.get("systemPrompt", existing.system_prompt)) or ""),
            )
        else:
            types[type_id] = PromptType(
                id=type_id,
                name=str(raw.get("name") or type_id),
                description=str(raw.get("description") or ""),
                system_prompt=str(raw.get("system_prompt", raw.get("systemPrompt", "")) or ""),
                builtin=False,
            )
    return list(types.values())


def get_prompt_type(
    prompt_type: Optional[str], custom: Optional[Mapping[str, Mapping[str, Any]]] = None
) -> Optional[PromptType]:
    for t in all_prompt_types(custom):
        if t.id == prompt_type:
            return t
    return None


def guidance_for(
    prompt_type: Optional[str], custom: Optional[Mapping[str, Mapping[str, Any]]] = None
) -> str:
    """Render the guidance block appended to the system instructions.

    Returns ``""`` for ``none``, unknown ids and types without guidance text.
    """
    if not prompt_type or prompt_type == "none":
        return ""
    found = get_prompt_type(prompt_type, custom)
    if found is None or not found.system_prompt:
        return ""
    return f"\n\nPrompt Type Guidance ({found.name}):\n{found.system_prompt}"


__all__ = [
    "PromptType",
    "BUILTIN_PROMPT_TYPES",
    "all_prompt_types",
    "get_prompt_type",
    "guidance_for",
]
