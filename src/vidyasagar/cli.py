"""Vidyasagar command line interface."""

from __future__ import annotations

import asyncio
import json
import subprocess
import sys
from typing import Any, Dict, List, Optional

import typer

from vidyasagar.core.errors import InvocationError, RequestValidationError
from vidyasagar.core.invoker import ModelInvoker
from vidyasagar.core.validation import FeatureModel
from vidyasagar.flows.catalog import get_flow
from vidyasagar.session.chat import TutorSession
from vidyasagar.serving.client import build_client
from vidyasagar.utils.config import load_app_config, save_config
from vidyasagar.utils.logging import configure_logging, get_logger

configure_logging()
LOG = get_logger(__name__)

app = typer.Typer(add_completion=False)
app_cfg = load_app_config()
invoker = ModelInvoker(build_client(app_cfg.model))

EXIT_INVOCATION = 1
EXIT_VALIDATION = 2


def run(cmd: list[str]) -> None:
    LOG.info("Running command", extra={"cmd": " ".join(cmd)})
    subprocess.run(cmd, check=True)


def _report_invalid(exc: RequestValidationError) -> None:
    for violation in exc.violations:
        typer.echo(f"{violation.field}: {violation.message} ({violation.constraint})", err=True)
    raise typer.Exit(code=EXIT_VALIDATION)


def _execute(name: str, request: Dict[str, Any], dry_run: bool) -> Optional[FeatureModel]:
    flow = get_flow(name)
    delimiter = app_cfg.prompts.list_delimiter
    try:
        if dry_run:
            typer.echo(flow.render(request, delimiter))
            return None
        return asyncio.run(flow.run(request, invoker, delimiter))
    except RequestValidationError as exc:
        _report_invalid(exc)
    except InvocationError as exc:
        typer.echo(exc.user_message, err=True)
        raise typer.Exit(code=EXIT_INVOCATION)


def _emit_json(result: FeatureModel) -> None:
    typer.echo(json.dumps(result.to_wire(), indent=2, ensure_ascii=False))


@app.command()
def notes(
    topic: str = typer.Option(..., help="Topic for the notes"),
    language: str = typer.Option("English", help="English|Bengali|Mixed Bangla-English"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response"),
    dry_run: bool = typer.Option(False, help="Print the prompt without calling the model"),
) -> None:
    """Generate structured, teacher-style notes on a topic."""
    result = _execute("notes", {"topic": topic, "language": language}, dry_run)
    if result is None:
        return
    if as_json:
        _emit_json(result)
    else:
        typer.echo(result.notes)


@app.command("mock-test")
def mock_test(
    topic: str = typer.Option(..., help="Topic of the mock test"),
    mcq: int = typer.Option(5, help="Number of multiple-choice questions"),
    short_answer: int = typer.Option(0, help="Number of short answer questions"),
    long_answer: int = typer.Option(0, help="Number of long answer questions"),
    numerical: int = typer.Option(0, help="Number of numerical problems"),
    difficulty: str = typer.Option("medium", help="easy|medium|hard"),
    language: str = typer.Option("English", help="English|Bengali|Mixed Bangla-English"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response"),
    dry_run: bool = typer.Option(False, help="Print the prompt without calling the model"),
) -> None:
    """Generate a mock test with answer key and detailed solutions."""
    request = {
        "topic": topic,
        "numMcq": mcq,
        "numShortAnswer": short_answer,
        "numLongAnswer": long_answer,
        "numNumerical": numerical,
        "difficulty": difficulty,
        "language": language,
    }
    result = _execute("mock_test", request, dry_run)
    if result is None:
        return
    if as_json:
        _emit_json(result)
        return
    for title, body in (
        ("Question Paper", result.question_paper),
        ("Answer Key", result.answer_key),
        ("Detailed Solutions", result.detailed_solutions),
    ):
        typer.echo(f"== {title} ==\n{body}\n")


@app.command()
def planner(
    start: str = typer.Option(..., help="Start date (YYYY-MM-DD)"),
    end: str = typer.Option(..., help="End date (YYYY-MM-DD)"),
    subject: List[str] = typer.Option(["Maths", "Physics", "Chemistry"], help="Subject, repeatable"),
    revision_interval: int = typer.Option(7, help="Days between revision slots"),
    mock_test_day: Optional[List[str]] = typer.Option(None, help="Mock test date, repeatable"),
    missed_days: Optional[int] = typer.Option(None, help="Study days missed so far"),
    progress: Optional[int] = typer.Option(None, help="Overall progress percentage"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response"),
    dry_run: bool = typer.Option(False, help="Print the prompt without calling the model"),
) -> None:
    """Generate a day-wise study timetable."""
    request: Dict[str, Any] = {
        "startDate": start,
        "endDate": end,
        "subjects": list(subject),
        "revisionDaysInterval": revision_interval,
        "mockTestDays": list(mock_test_day or []),
        "missedDays": missed_days,
        "progress": progress,
    }
    result = _execute("planner", request, dry_run)
    if result is None:
        return
    if as_json:
        _emit_json(result)
        return
    for day in result.timetable:
        typer.echo(f"{day.date}: {'; '.join(day.activities)}")


@app.command()
def tutor(
    message: Optional[str] = typer.Option(None, help="Ask a single question and exit"),
) -> None:
    """Chat with Vidyasagar. Type 'exit' to leave."""
    session = TutorSession(invoker)

    def ask(text: str) -> None:
        try:
            reply = asyncio.run(session.send(text))
        except RequestValidationError as exc:
            if message is not None:
                _report_invalid(exc)
            typer.echo(exc.violations[0].message, err=True)
            return
        except InvocationError as exc:
            typer.echo(exc.user_message, err=True)
            if message is not None:
                raise typer.Exit(code=EXIT_INVOCATION)
            return
        typer.echo(f"Vidyasagar: {reply.content}")

    if message is not None:
        ask(message)
        return
    while True:
        text = typer.prompt("You", default="", show_default=False)
        if text.strip().lower() in ("exit", "quit"):
            break
        ask(text)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind host, defaults to config"),
    port: Optional[int] = typer.Option(None, help="Bind port, defaults to config"),
) -> None:
    """Run the HTTP gateway under uvicorn."""
    run(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "vidyasagar.serving.gateway:app",
            "--host",
            host or app_cfg.gateway.host,
            "--port",
            str(port or app_cfg.gateway.port),
        ]
    )


@app.command()
def config(
    write: Optional[str] = typer.Option(None, help="Also save the resolved configuration as YAML to this path"),
) -> None:
    """Show the resolved configuration."""
    typer.echo(json.dumps(app_cfg.model_dump(), indent=2))
    if write:
        save_config(app_cfg, write)
        typer.echo(f"Wrote configuration to {write}")


if __name__ == "__main__":
    app()
