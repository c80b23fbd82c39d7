"""CLI entry point for the Code Council."""

from __future__ import annotations

import asyncio
from typing import IO, Any

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown

from council import __version__
from council.config import CouncilConfig
from council.engine.gateway import ModelGateway
from council.engine.orchestrator import Gateway, ReviewOrchestrator
from council.errors import CouncilError
from council.logging_config import configure_logging
from council.tools import ToolResponse, error_response, list_review_config, run_tool

console = Console()
err_console = Console(stderr=True)


def _load_config() -> CouncilConfig:
    load_dotenv()
    return CouncilConfig.from_env()


def _get_gateway(config: CouncilConfig) -> Gateway:
    return ModelGateway(config.require_api_key(), config.llm)


async def _run_review(config: CouncilConfig, tool: str, payload: dict[str, Any]) -> ToolResponse:
    try:
        gateway = _get_gateway(config)
    except CouncilError as exc:
        return error_response(exc)

    try:
        orchestrator = ReviewOrchestrator(config, gateway)
        return await run_tool(tool, payload, orchestrator)
    finally:
        if isinstance(gateway, ModelGateway):
            await gateway.aclose()


def _review(tool: str, payload: dict[str, Any]) -> None:
    try:
        config = _load_config()
    except CouncilError as exc:
        _print_response(error_response(exc))
        raise SystemExit(1) from exc

    response = asyncio.run(_run_review(config, tool, payload))
    _print_response(response)
    if response.is_error:
        raise SystemExit(1)


def _print_response(response: ToolResponse) -> None:
    if response.is_error:
        err_console.print(response.text, style="red", markup=False, highlight=False)
    else:
        console.print(Markdown(response.text))


@click.group()
@click.version_option(version=__version__, prog_name="council")
@click.option("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
def main(log_level: str | None) -> None:
    """Code Council: multi-model code review across parallel LLMs."""
    configure_logging(level=log_level.upper() if log_level else None)


@main.command("review-code")
@click.argument("source", type=click.File("r"))
@click.option("--language", help="Programming language of the code")
@click.option("--context", help="Additional context about the code")
def review_code(source: IO[str], language: str | None, context: str | None) -> None:
    """Review code (file path or '-' for stdin) for quality, bugs, and security."""
    _review("review_code", {"code": source.read(), "language": language, "context": context})


@main.command("review-frontend")
@click.argument("source", type=click.File("r"))
@click.option("--framework", help="Frontend framework (react, vue, svelte, ...)")
@click.option(
    "--review-type",
    type=click.Choice(["accessibility", "performance", "ux", "full"]),
    default=None,
    help="Focus of the review (default: full)",
)
@click.option("--context", help="Additional context")
def review_frontend(
    source: IO[str], framework: str | None, review_type: str | None, context: str | None
) -> None:
    """Review frontend code for accessibility, performance, and UX."""
    _review(
        "review_frontend",
        {
            "code": source.read(),
            "framework": framework,
            "review_type": review_type,
            "context": context,
        },
    )


@main.command("review-backend")
@click.argument("source", type=click.File("r"))
@click.option("--language", help="Language/framework (node, python, go, ...)")
@click.option(
    "--review-type",
    type=click.Choice(["security", "performance", "architecture", "full"]),
    default=None,
    help="Focus of the review (default: full)",
)
@click.option("--context", help="Additional context")
def review_backend(
    source: IO[str], language: str | None, review_type: str | None, context: str | None
) -> None:
    """Review backend code for security, performance, and architecture."""
    _review(
        "review_backend",
        {
            "code": source.read(),
            "language": language,
            "review_type": review_type,
            "context": context,
        },
    )


@main.command("review-plan")
@click.argument("source", type=click.File("r"))
@click.option(
    "--review-type",
    type=click.Choice(["feasibility", "completeness", "risks", "timeline", "full"]),
    default=None,
    help="Focus of the review (default: full)",
)
@click.option("--context", help="Project constraints, timeline, team size")
def review_plan(source: IO[str], review_type: str | None, context: str | None) -> None:
    """Review an implementation plan before any code is written."""
    _review("review_plan", {"plan": source.read(), "review_type": review_type, "context": context})


@main.command("review-git")
@click.option(
    "--review-type",
    type=click.Choice(["staged", "unstaged", "diff", "commit"]),
    default="staged",
    help="Which changes to review (default: staged)",
)
@click.option("--commit", "commit_hash", help="Commit to review with --review-type commit")
@click.option("--context", help="Additional context about the changes")
def review_git(review_type: str, commit_hash: str | None, context: str | None) -> None:
    """Review git changes in the current repository."""
    _review(
        "review_git_changes",
        {"review_type": review_type, "commit_hash": commit_hash, "context": context},
    )


@main.command("config")
def show_config() -> None:
    """Show the current model configuration."""
    try:
        config = _load_config()
    except CouncilError as exc:
        _print_response(error_response(exc))
        raise SystemExit(1) from exc
    _print_response(list_review_config(config))
