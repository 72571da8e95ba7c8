"""Day-wise study timetable generation."""

from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import Field, StrictInt, model_validator

from vidyasagar.core.invoker import ModelInvoker
from vidyasagar.core.prompts import PromptTemplate, join_items, when
from vidyasagar.core.validation import CrossFieldError, FeatureModel
from vidyasagar.flows.base import Flow
from vidyasagar.flows.common import IsoDate

Subject = Annotated[str, Field(min_length=1)]


class PlannerRequest(FeatureModel):
    start_date: IsoDate = Field(..., alias="startDate", description="The start date for the study plan (YYYY-MM-DD).")
    end_date: IsoDate = Field(..., alias="endDate", description="The end date for the study plan (YYYY-MM-DD).")
    subjects: List[Subject] = Field(..., min_length=1, description="List of subjects to study.")
    revision_days_interval: StrictInt = Field(
        ..., alias="revisionDaysInterval", ge=1, le=14, description="The interval (in days) for revision slots."
    )
    mock_test_days: List[IsoDate] = Field(
        default_factory=list,
        alias="mockTestDays",
        description="Specific dates (YYYY-MM-DD) designated for mock tests.",
    )
    missed_days: Optional[StrictInt] = Field(default=None, alias="missedDays", ge=0)
    progress: Optional[StrictInt] = Field(default=None, ge=0, le=100, description="Percentage of overall progress.")

    @model_validator(mode="after")
    def _dates_in_order(self) -> "PlannerRequest":
        if self.end_date < self.start_date:
            raise CrossFieldError("endDate", "date_order", "End date must not be before the start date.")
        return self


class TimetableDay(FeatureModel):
    date: str = Field(..., min_length=1, description="Date in YYYY-MM-DD format.")
    activities: List[str] = Field(
        ..., description="List of activities for the day (e.g., study Math, revision, mock test)."
    )


class PlannerResponse(FeatureModel):
    timetable: List[TimetableDay] = Field(
        ..., min_length=1, description="A day-wise timetable with subjects, revision slots and mock test days."
    )


def _sections(req: PlannerRequest, delimiter: str) -> List[Optional[str]]:
    details = [
        f"Start Date: {req.start_date.isoformat()}",
        f"End Date: {req.end_date.isoformat()}",
        f"Subjects: {join_items(req.subjects, delimiter)}",
        f"Revision Days Interval: {req.revision_days_interval} days",
    ]
    if req.mock_test_days:
        details.append(f"Mock Test Days: {join_items((d.isoformat() for d in req.mock_test_days), delimiter)}")
    if req.missed_days is not None:
        details.append(f"Missed Days: {req.missed_days}")
    if req.progress is not None:
        details.append(f"Progress: {req.progress}%")

    return [
        "You are an AI study planner expert that generates a day-wise study timetable.",
        "The timetable should include specific subjects to study, revision slots scheduled at regular intervals, "
        "and designated mock test days.",
        when(
            req.missed_days is not None or req.progress is not None,
            "Consider the student's progress and missed days to adjust the timetable accordingly. "
            "If progress is low or missed days are high, allocate more time to core concepts.",
        ),
        "\n".join(details),
        "Generate a detailed timetable, ensuring it is well-organized and easy to follow. "
        "Cover every date from the start date to the end date.",
    ]


PLANNER_TEMPLATE = PromptTemplate(name="generateStudyPlannerPrompt", build=_sections)

PLANNER_FLOW: Flow[PlannerRequest, PlannerResponse] = Flow(
    name="planner",
    input_model=PlannerRequest,
    output_model=PlannerResponse,
    template=PLANNER_TEMPLATE,
    error_message="Failed to generate study plan. Please try again.",
)


async def generate_study_plan(request, invoker: ModelInvoker, delimiter: str = ", ") -> PlannerResponse:
    return await PLANNER_FLOW.run(request, invoker, delimiter)
