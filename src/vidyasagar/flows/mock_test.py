"""Mock test generation: question paper, answer key and solutions."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, StrictInt, model_validator

from vidyasagar.core.invoker import ModelInvoker
from vidyasagar.core.prompts import PromptTemplate, when
from vidyasagar.core.validation import CrossFieldError, FeatureModel
from vidyasagar.flows.base import Flow
from vidyasagar.flows.common import TOPIC_MIN_LENGTH, Difficulty, Language, needs_bengali_script

MAX_MCQ = 20
MAX_SHORT_ANSWER = 10
MAX_LONG_ANSWER = 5
MAX_NUMERICAL = 10


class MockTestRequest(FeatureModel):
    topic: str = Field(..., min_length=TOPIC_MIN_LENGTH, description="The topic of the mock test.")
    num_mcq: StrictInt = Field(..., alias="numMcq", ge=0, le=MAX_MCQ)
    num_short_answer: StrictInt = Field(..., alias="numShortAnswer", ge=0, le=MAX_SHORT_ANSWER)
    num_long_answer: StrictInt = Field(..., alias="numLongAnswer", ge=0, le=MAX_LONG_ANSWER)
    num_numerical: StrictInt = Field(..., alias="numNumerical", ge=0, le=MAX_NUMERICAL)
    difficulty: Difficulty
    language: Language

    @property
    def total_questions(self) -> int:
        return self.num_mcq + self.num_short_answer + self.num_long_answer + self.num_numerical

    @model_validator(mode="after")
    def _at_least_one_question(self) -> "MockTestRequest":
        if self.total_questions <= 0:
            raise CrossFieldError("numMcq", "at_least_one_question", "At least one question must be requested.")
        return self


class MockTestResponse(FeatureModel):
    question_paper: str = Field(
        ..., alias="questionPaper", min_length=1, description="The mock test in question paper style."
    )
    answer_key: str = Field(..., alias="answerKey", min_length=1, description="The answer key for the mock test.")
    detailed_solutions: str = Field(
        ..., alias="detailedSolutions", min_length=1, description="The detailed solutions for the mock test."
    )


def _sections(req: MockTestRequest, delimiter: str) -> List[Optional[str]]:
    return [
        "You are an expert teacher specialized in creating mock tests for students.",
        "You will generate a mock test based on the following specifications:\n"
        f"Topic: {req.topic}\n"
        f"Difficulty: {req.difficulty}\n"
        f"Language: {req.language}",
        "Format the output in a question paper style, including marks for each question.\n"
        "Also, generate an answer key and detailed solutions for all questions.",
        "Make sure that the questions are relevant to the topic and appropriate for the specified difficulty level.",
        when(
            needs_bengali_script(req.language),
            f"The language is {req.language}: use appropriate Bengali characters and grammar.",
        ),
        when(req.num_mcq, f"Generate {req.num_mcq} multiple-choice questions."),
        when(req.num_short_answer, f"Generate {req.num_short_answer} short answer questions."),
        when(req.num_long_answer, f"Generate {req.num_long_answer} long answer questions."),
        when(req.num_numerical, f"Generate {req.num_numerical} numerical problems."),
        "Output the question paper, answer key, and detailed solutions in a well-structured format.",
    ]


MOCK_TEST_TEMPLATE = PromptTemplate(name="generateMockTestPrompt", build=_sections)

MOCK_TEST_FLOW: Flow[MockTestRequest, MockTestResponse] = Flow(
    name="mock_test",
    input_model=MockTestRequest,
    output_model=MockTestResponse,
    template=MOCK_TEST_TEMPLATE,
    error_message="Failed to generate mock test. Please try again.",
)


async def generate_mock_test(request, invoker: ModelInvoker, delimiter: str = ", ") -> MockTestResponse:
    return await MOCK_TEST_FLOW.run(request, invoker, delimiter)
