"""Lookup table of every feature flow."""

from __future__ import annotations

from typing import Dict

from vidyasagar.flows.base import Flow
from vidyasagar.flows.mock_test import MOCK_TEST_FLOW
from vidyasagar.flows.notes import NOTES_FLOW
from vidyasagar.flows.planner import PLANNER_FLOW
from vidyasagar.flows.tutor import TUTOR_FLOW

FLOWS: Dict[str, Flow] = {
    flow.name: flow for flow in (NOTES_FLOW, MOCK_TEST_FLOW, TUTOR_FLOW, PLANNER_FLOW)
}


def get_flow(name: str) -> Flow:
    try:
        return FLOWS[name]
    except KeyError as e:
        raise ValueError(f"Unknown flow '{name}', expected one of {sorted(FLOWS)}") from e
