"""Teacher-style structured notes."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from vidyasagar.core.invoker import ModelInvoker
from vidyasagar.core.prompts import PromptTemplate, when
from vidyasagar.core.validation import FeatureModel
from vidyasagar.flows.base import Flow
from vidyasagar.flows.common import TOPIC_MIN_LENGTH, Language, needs_bengali_script


class NotesRequest(FeatureModel):
    topic: str = Field(..., min_length=TOPIC_MIN_LENGTH, description="The topic for which to generate notes.")
    language: Language = Field(..., description="The language in which to generate the notes.")


class NotesResponse(FeatureModel):
    notes: str = Field(..., min_length=1, description="The generated structured notes.")


def _sections(req: NotesRequest, delimiter: str) -> List[Optional[str]]:
    return [
        "You are an expert teacher skilled at creating well-structured notes for students.",
        f"Please generate structured notes on the following topic: {req.topic}.\n"
        f"The notes should be in {req.language} language.",
        "The notes should include:\n"
        "- Headings and subheadings to organize the content.\n"
        "- Bullet points to list key information.\n"
        "- Definitions of important terms.\n"
        "- Examples to illustrate concepts.\n"
        "- Exam tips to help students prepare for exams.\n"
        '- "Exam Focus" sections\n'
        '- "Common Mistakes" sections\n'
        '- "Memory Tricks" sections',
        when(needs_bengali_script(req.language), f"Write in {req.language} using appropriate Bengali script."),
        "If there are math equations, please include LaTeX support.",
    ]


NOTES_TEMPLATE = PromptTemplate(name="generateStructuredNotesPrompt", build=_sections)

NOTES_FLOW: Flow[NotesRequest, NotesResponse] = Flow(
    name="notes",
    input_model=NotesRequest,
    output_model=NotesResponse,
    template=NOTES_TEMPLATE,
    error_message="Failed to generate notes. Please try again.",
)


async def generate_notes(request, invoker: ModelInvoker, delimiter: str = ", ") -> NotesResponse:
    return await NOTES_FLOW.run(request, invoker, delimiter)
