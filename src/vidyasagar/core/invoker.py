"""Single-shot model invocation with schema-checked replies."""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Generic, Mapping, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from vidyasagar.core.errors import InvocationError
from vidyasagar.monitoring.metrics import observe_model_call
from vidyasagar.serving.client import ModelClient
from vidyasagar.utils.logging import get_logger

LOG = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)

_JSON_TYPES = {
    "object": "OBJECT",
    "array": "ARRAY",
    "string": "STRING",
    "integer": "INTEGER",
    "number": "NUMBER",
    "boolean": "BOOLEAN",
}


@dataclass(frozen=True)
class Ok(Generic[M]):
    value: M


@dataclass(frozen=True)
class SchemaMismatch:
    reason: str


ParseResult = Union[Ok[M], SchemaMismatch]


def _convert(node: Dict[str, Any], defs: Dict[str, Any]) -> Dict[str, Any]:
    if "$ref" in node:
        return _convert(defs[node["$ref"].split("/")[-1]], defs)
    if "anyOf" in node:
        options = [opt for opt in node["anyOf"] if opt.get("type") != "null"]
        out = _convert(options[0], defs)
        if len(options) < len(node["anyOf"]):
            out["nullable"] = True
        return out

    out: Dict[str, Any] = {"type": _JSON_TYPES[node.get("type", "string")]}
    if "description" in node:
        out["description"] = node["description"]
    if "enum" in node:
        out["enum"] = [str(v) for v in node["enum"]]
    if out["type"] == "OBJECT":
        props = node.get("properties", {})
        out["properties"] = {name: _convert(sub, defs) for name, sub in props.items()}
        out["propertyOrdering"] = list(props)
        if node.get("required"):
            out["required"] = list(node["required"])
    elif out["type"] == "ARRAY":
        out["items"] = _convert(node.get("items", {"type": "string"}), defs)
    return out


def response_schema_for(model: Type[BaseModel]) -> Dict[str, Any]:
    """Structured-output schema for ``model``, with every ``$ref`` inlined."""
    schema = model.model_json_schema(by_alias=True)
    return _convert(schema, schema.get("$defs", {}))


def parse_reply(raw: Union[str, bytes, Mapping[str, Any]], model: Type[M]) -> ParseResult:
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        fenced = _FENCE.match(text)
        if fenced:
            text = fenced.group(1)
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            return SchemaMismatch(f"reply is not JSON: {exc.msg}")
    if not isinstance(raw, Mapping):
        return SchemaMismatch(f"reply is a {type(raw).__name__}, expected an object")
    try:
        return Ok(model.model_validate(raw))
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '__root__'}: {err['msg']}" for err in exc.errors()
        )
        return SchemaMismatch(problems)


class ModelInvoker:
    """Sends one prompt per call and validates the reply against a model."""

    def __init__(self, client: ModelClient) -> None:
        self.client = client

    @property
    def provider(self) -> str:
        return getattr(self.client, "provider", type(self.client).__name__)

    async def invoke(self, prompt: str, output_model: Type[M], flow: str = "") -> M:
        schema = response_schema_for(output_model)
        try:
            raw = await asyncio.to_thread(self.client.generate, prompt, schema)
        except Exception as exc:
            observe_model_call(self.provider, False)
            LOG.warning("Model call failed", extra={"flow": flow, "provider": self.provider, "error": str(exc)})
            raise InvocationError(InvocationError.TRANSPORT, str(exc)) from exc
        observe_model_call(self.provider, True)

        result = parse_reply(raw, output_model)
        if isinstance(result, SchemaMismatch):
            LOG.warning("Model reply did not match schema", extra={"flow": flow, "reason": result.reason})
            raise InvocationError(InvocationError.SCHEMA, result.reason)
        LOG.debug("Model reply accepted", extra={"flow": flow, "reply_chars": len(str(raw))})
        return result.value
