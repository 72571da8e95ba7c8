"""HTTP gateway exposing one route per feature."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from vidyasagar.core.errors import InvocationError, RequestValidationError
from vidyasagar.core.invoker import ModelInvoker
from vidyasagar.flows.catalog import get_flow
from vidyasagar.flows.mock_test import MockTestResponse
from vidyasagar.flows.notes import NotesResponse
from vidyasagar.flows.planner import PlannerResponse
from vidyasagar.flows.tutor import TutorResponse
from vidyasagar.monitoring.metrics import render_metrics
from vidyasagar.serving.client import build_client
from vidyasagar.utils.config import AppConfig, load_app_config
from vidyasagar.utils.logging import configure_logging, get_logger

configure_logging()
LOG = get_logger(__name__)

app = FastAPI(title="Vidyasagar Study Assistant", version="0.1.0")
app_cfg: AppConfig = load_app_config()
invoker = ModelInvoker(build_client(app_cfg.model))


@app.exception_handler(RequestValidationError)
async def validation_failed(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.to_list()})


@app.exception_handler(InvocationError)
async def invocation_failed(request: Request, exc: InvocationError) -> JSONResponse:
    LOG.error("Generation failed", extra={"path": request.url.path, "kind": exc.kind})
    return JSONResponse(status_code=502, content={"detail": exc.user_message})


async def _run(name: str, body: Dict[str, Any]):
    return await get_flow(name).run(body, invoker, app_cfg.prompts.list_delimiter)


@app.get("/healthz")
def health() -> Dict[str, str]:
    return {"status": "ok", "provider": invoker.provider}


@app.post("/notes", response_model=NotesResponse)
async def notes(body: Dict[str, Any] = Body(...)) -> NotesResponse:
    return await _run("notes", body)


@app.post("/mock-tests", response_model=MockTestResponse)
async def mock_tests(body: Dict[str, Any] = Body(...)) -> MockTestResponse:
    return await _run("mock_test", body)


@app.post("/tutor", response_model=TutorResponse)
async def tutor(body: Dict[str, Any] = Body(...)) -> TutorResponse:
    return await _run("tutor", body)


@app.post("/planner", response_model=PlannerResponse)
async def planner(body: Dict[str, Any] = Body(...)) -> PlannerResponse:
    return await _run("planner", body)


@app.get("/metrics")
def metrics() -> PlainTextResponse:
    data, content_type = render_metrics()
    return PlainTextResponse(content=data.decode(), media_type=content_type)
