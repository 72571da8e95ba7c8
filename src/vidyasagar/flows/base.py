"""Validate, render and invoke: the pipeline behind every feature."""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Generic, Mapping, Type, TypeVar, Union

from vidyasagar.core.errors import InvocationError, RequestValidationError
from vidyasagar.core.invoker import ModelInvoker
from vidyasagar.core.prompts import DEFAULT_LIST_DELIMITER, PromptTemplate
from vidyasagar.core.validation import FeatureModel, validate_request
from vidyasagar.monitoring.metrics import observe_flow
from vidyasagar.utils.logging import get_logger

LOG = get_logger(__name__)

In = TypeVar("In", bound=FeatureModel)
Out = TypeVar("Out", bound=FeatureModel)


class FlowState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    RENDERING = "rendering"
    INVOKING = "invoking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Flow(Generic[In, Out]):
    """One feature's facade.

    ``run`` passes through the states once; there is no retry transition and
    no partial result. Instances hold only immutable definitions, so a single
    flow can serve concurrent calls.
    """

    def __init__(
        self,
        name: str,
        input_model: Type[In],
        output_model: Type[Out],
        template: PromptTemplate,
        error_message: str,
    ) -> None:
        self.name = name
        self.input_model = input_model
        self.output_model = output_model
        self.template = template
        self.error_message = error_message

    def _enter(self, state: FlowState) -> FlowState:
        LOG.debug("Flow state", extra={"flow": self.name, "state": state.value})
        return state

    def validate(self, request: Union[In, Mapping[str, Any]]) -> In:
        return validate_request(self.name, self.input_model, request)

    def render(self, request: Union[In, Mapping[str, Any]], delimiter: str = DEFAULT_LIST_DELIMITER) -> str:
        """Validate and render without calling the model."""
        return self.template.render(self.validate(request), delimiter)

    async def run(
        self,
        request: Union[In, Mapping[str, Any]],
        invoker: ModelInvoker,
        delimiter: str = DEFAULT_LIST_DELIMITER,
    ) -> Out:
        state = self._enter(FlowState.IDLE)
        start = time.perf_counter()
        try:
            state = self._enter(FlowState.VALIDATING)
            validated = self.validate(request)
            state = self._enter(FlowState.RENDERING)
            prompt = self.template.render(validated, delimiter)
            state = self._enter(FlowState.INVOKING)
            result = await invoker.invoke(prompt, self.output_model, flow=self.name)
        except RequestValidationError as exc:
            observe_flow(self.name, "invalid", time.perf_counter() - start)
            LOG.info("Request rejected", extra={"flow": self.name, "field": exc.field, "constraint": exc.constraint})
            raise
        except InvocationError as exc:
            exc.user_message = self.error_message
            observe_flow(self.name, "failed", time.perf_counter() - start)
            LOG.warning(
                "Flow failed",
                extra={"flow": self.name, "state": FlowState.FAILED.value, "from_state": state.value, "kind": exc.kind},
            )
            raise
        latency = time.perf_counter() - start
        observe_flow(self.name, "succeeded", latency)
        LOG.info(
            "Flow succeeded",
            extra={"flow": self.name, "state": FlowState.SUCCEEDED.value, "prompt_chars": len(prompt), "latency_s": latency},
        )
        return result
