"""FastAPI server for programmatic review access."""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import click
from dotenv import load_dotenv
from fastapi import Body, FastAPI, HTTPException, Request

from council import __version__
from council.config import CouncilConfig
from council.engine.gateway import ModelGateway
from council.engine.orchestrator import Gateway, ReviewOrchestrator
from council.errors import ConfigurationError
from council.logging_config import configure_logging
from council.tools import REVIEW_TOOLS, error_response, list_review_config, run_tool


def create_app(config: CouncilConfig | None = None, gateway: Gateway | None = None) -> FastAPI:
    """Build the API app.

    Without an API key the app still starts; review calls then return an
    error response and /api/health reports the key as missing.
    """
    cfg = config or CouncilConfig.from_env()
    owned: ModelGateway | None = None
    if gateway is None and cfg.api_key:
        owned = ModelGateway(cfg.api_key, cfg.llm)
        gateway = owned

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        yield
        if owned is not None:
            await owned.aclose()

    app = FastAPI(
        title="Code Council API",
        version=__version__,
        description="Multi-model code review across parallel LLMs",
        lifespan=lifespan,
    )
    app.state.start_time = time.monotonic()
    app.state.config = cfg
    app.state.orchestrator = ReviewOrchestrator(cfg, gateway) if gateway is not None else None

    @app.get("/api/health")
    async def health(request: Request) -> dict[str, Any]:
        """Health check."""
        uptime = time.monotonic() - request.app.state.start_time
        return {
            "status": "ok",
            "version": __version__,
            "uptime_seconds": round(uptime, 1),
            "api_key_configured": request.app.state.orchestrator is not None,
        }

    @app.get("/api/config")
    async def config_view(request: Request) -> dict[str, Any]:
        """Configured model lists per review task."""
        current: CouncilConfig = request.app.state.config
        return {
            "code": list(current.code_models),
            "frontend": list(current.frontend_models),
            "backend": list(current.backend_models),
            "plan": list(current.plan_models),
            "text": list_review_config(current).text,
        }

    @app.get("/api/tools")
    async def tools() -> dict[str, Any]:
        """Available review tools and their input schemas."""
        return {
            "tools": [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "input_schema": tool.input_model.model_json_schema(),
                }
                for tool in REVIEW_TOOLS.values()
            ]
        }

    @app.post("/api/tools/{name}")
    async def call_tool(
        name: str, request: Request, payload: dict[str, Any] = Body(default_factory=dict)
    ) -> dict[str, Any]:
        """Run a review tool and return its report."""
        if name not in REVIEW_TOOLS:
            raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")

        orchestrator: ReviewOrchestrator | None = request.app.state.orchestrator
        if orchestrator is None:
            missing = ConfigurationError(
                "OPENROUTER_API_KEY environment variable is required", "OPENROUTER_API_KEY"
            )
            return error_response(missing).to_dict()

        response = await run_tool(name, payload, orchestrator)
        return response.to_dict()

    return app


@click.command()
@click.option("--port", default=3848, help="Port to listen on")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
def main(port: int, host: str) -> None:
    """Start the Code Council API server."""
    import uvicorn

    load_dotenv()
    configure_logging()
    uvicorn.run(create_app(), host=host, port=port)
