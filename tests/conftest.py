import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from vidyasagar.core.invoker import ModelInvoker


class StubClient:
    provider = "stub"

    def __init__(self, reply: Any = None, error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def generate(self, prompt: str, response_schema: Dict[str, Any]) -> str:
        self.calls.append((prompt, response_schema))
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, str):
            return self.reply
        return json.dumps(self.reply)


MOCK_TEST_REPLY = {
    "questionPaper": "Q1. A car accelerates uniformly... [2 marks]",
    "answerKey": "Q1. (b)",
    "detailedSolutions": "Using v = u + at ...",
}

PLANNER_REPLY = {
    "timetable": [
        {"date": "2024-06-01", "activities": ["Study Maths", "Study Physics"]},
        {"date": "2024-06-02", "activities": ["Revision"]},
    ]
}


@pytest.fixture
def kinematics_request() -> Dict[str, Any]:
    return {
        "topic": "Kinematics",
        "numMcq": 5,
        "numShortAnswer": 0,
        "numLongAnswer": 0,
        "numNumerical": 0,
        "difficulty": "medium",
        "language": "English",
    }


@pytest.fixture
def planner_request() -> Dict[str, Any]:
    return {
        "startDate": "2024-06-01",
        "endDate": "2024-06-30",
        "subjects": ["Maths", "Physics", "Chemistry"],
        "revisionDaysInterval": 7,
        "mockTestDays": ["2024-06-10"],
        "missedDays": 2,
        "progress": 40,
    }


def stub_invoker(reply: Any = None, error: Optional[Exception] = None) -> Tuple[ModelInvoker, StubClient]:
    client = StubClient(reply=reply, error=error)
    return ModelInvoker(client), client


@pytest.fixture
def make_invoker():
    return stub_invoker


@pytest.fixture
def mock_test_reply() -> Dict[str, Any]:
    return dict(MOCK_TEST_REPLY)


@pytest.fixture
def planner_reply() -> Dict[str, Any]:
    return json.loads(json.dumps(PLANNER_REPLY))
