"""
Prompt construction for the completion service.

A prompt mode selects one of three message templates:
- default: plain summary plus three themes.
- researcher: decision-ready wording with stricter framing of the analyst role.
- stepwise: observations first, then themes, with only JSON in the final answer.

Every template embeds the same response shape in the system message. The
builders never look at what the service sends back.
"""

from enum import Enum
from typing import Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel


DEFAULT_OBJECTIVE = "Understand the participant's experience and surface actionable insights."

RESPONSE_SHAPE = (
    "{\n"
    '  "summary": "...",\n'
    '  "themes": [\n'
    '    {"title": "...", "description": "..."},\n'
    '    {"title": "...", "description": "..."},\n'
    '    {"title": "...", "description": "..."}\n'
    "  ]\n"
    "}"
)


class PromptMode(str, Enum):
    DEFAULT = "default"
    RESEARCHER = "researcher"
    STEPWISE = "stepwise"


class Message(BaseModel):
    role: Literal["system", "user"]
    content: str


def _base_system_prompt(study_title: str, persona: str, objective: str) -> str:
    return (
        "You are an expert research analyst helping product teams interpret user interviews.\n\n"
        f"Study: {study_title}\n"
        f"Persona: {persona}\n"
        f"Research objective: {objective}\n\n"
        "Always answer with a single JSON object of exactly this shape:\n"
        f"{RESPONSE_SHAPE}\n"
        "The themes array must contain exactly three objects, each with a title and a description."
    )


def _fenced_snippet(snippet: str) -> str:
    # No escaping: a snippet containing the fence itself ends the block early.
    return f'Interview snippet:\n"""\n{snippet}\n"""\n\n'


def _default_messages(study_title: str, persona: str, objective: str, snippet: str) -> List[Message]:
    user = (
        _fenced_snippet(snippet)
        + "1) Summarize this snippet in 2 concise sentences.\n"
        "2) Extract exactly 3 key themes or insights, each with a short title and a one-sentence description.\n\n"
        "Return JSON only."
    )
    return [
        Message(role="system", content=_base_system_prompt(study_title, persona, objective)),
        Message(role="user", content=user),
    ]


def _researcher_messages(study_title: str, persona: str, objective: str, snippet: str) -> List[Message]:
    system = (
        _base_system_prompt(study_title, persona, objective)
        + "\n\n"
        "Act as a senior user researcher preparing findings for a product decision:\n"
        "- Stay faithful to what the participant actually said; never invent facts.\n"
        "- Phrase every insight so a product team can act on it.\n"
        "- Prefer insights that matter for this persona and this research objective."
    )
    user = (
        _fenced_snippet(snippet)
        + "1) Write a decision-ready summary of exactly 2 sentences:\n"
        "   - Sentence 1: the participant's overall sentiment.\n"
        "   - Sentence 2: the main problems or opportunities raised.\n"
        "2) Extract exactly 3 themes that are specific to this snippet.\n"
        "   Generic themes such as \"usability issues\" or \"needs improvement\" are not acceptable;\n"
        "   each title must name the concrete behaviour, need or pain point, and each description\n"
        "   must explain it in one sentence.\n\n"
        "Return JSON only."
    )
    return [
        Message(role="system", content=system),
        Message(role="user", content=user),
    ]


def _stepwise_messages(study_title: str, persona: str, objective: str, snippet: str) -> List[Message]:
    user = (
        _fenced_snippet(snippet)
        + "Work in two stages.\n"
        "Stage 1: privately list 5-8 observations from the snippet, staying as close to the\n"
        "participant's own words as possible.\n"
        "Stage 2: using only those observations, derive exactly 3 themes, each with a short title\n"
        "and a one-sentence description, and write a 2-sentence summary.\n\n"
        "Do NOT include the observations in your answer.\n"
        "Your final answer must be the JSON object only, with no other text."
    )
    return [
        Message(role="system", content=_base_system_prompt(study_title, persona, objective)),
        Message(role="user", content=user),
    ]


_BUILDERS: Dict[PromptMode, Callable[[str, str, str, str], List[Message]]] = {
    PromptMode.DEFAULT: _default_messages,
    PromptMode.RESEARCHER: _researcher_messages,
    PromptMode.STEPWISE: _stepwise_messages,
}


def build_messages(
    mode: Union[PromptMode, str],
    study_title: str,
    persona: str,
    snippet: str,
    objective: Optional[str] = None,
) -> List[Message]:
    """
    Return the ordered chat messages for one snippet.

    Parameters
    ----------
    mode:
        A `PromptMode` or its string value. Unknown strings raise ``ValueError``.
    objective:
        Research objective; blank or missing falls back to `DEFAULT_OBJECTIVE`.
    """
    builder = _BUILDERS[PromptMode(mode)]
    if not objective or not objective.strip():
        objective = DEFAULT_OBJECTIVE
    return builder(study_title, persona, objective, snippet)


def to_openai_messages(messages: List[Message]) -> List[dict]:
    return [message.model_dump() for message in messages]
