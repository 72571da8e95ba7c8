"""Chat with Vidyasagar, the Maths, Physics and Chemistry tutor.

Each call carries one message. Earlier turns are not sent upstream, so the
tutor answers every message on its own.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import ConfigDict, Field

from vidyasagar.core.invoker import ModelInvoker
from vidyasagar.core.prompts import PromptTemplate
from vidyasagar.core.validation import FeatureModel
from vidyasagar.flows.base import Flow

PERSONA = (
    "You are Vidyasagar, an AI tutor specializing in Maths, Physics, and Chemistry. "
    "You explain reasoning, ask follow-up questions, and provide analogies from daily Indian life, "
    "without giving direct answers."
)


class TutorRequest(FeatureModel):
    # sent exactly as typed
    model_config = ConfigDict(str_strip_whitespace=False)

    message: str = Field(..., min_length=1, description="The user message to the AI tutor.")


class TutorResponse(FeatureModel):
    response: str = Field(..., min_length=1, description="The AI tutor's response.")


def _sections(req: TutorRequest, delimiter: str) -> List[Optional[str]]:
    return [PERSONA, f"User: {req.message}\nVidyasagar:"]


TUTOR_TEMPLATE = PromptTemplate(name="chatWithVidyasagarPrompt", build=_sections)

TUTOR_FLOW: Flow[TutorRequest, TutorResponse] = Flow(
    name="tutor",
    input_model=TutorRequest,
    output_model=TutorResponse,
    template=TUTOR_TEMPLATE,
    error_message="Failed to get a response. Please try again.",
)


async def chat_with_tutor(request, invoker: ModelInvoker, delimiter: str = ", ") -> TutorResponse:
    return await TUTOR_FLOW.run(request, invoker, delimiter)
