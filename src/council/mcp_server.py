"""FastMCP stdio server exposing the review tools.

Register with an MCP client, for example::

    {
      "command": "council-mcp",
      "env": {
        "OPENROUTER_API_KEY": "your-key",
        "CODE_REVIEW_MODELS": "[\\"anthropic/claude-3.5-sonnet\\", \\"openai/gpt-4-turbo\\"]"
      }
    }
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from council import __version__
from council.config import CouncilConfig
from council.engine.gateway import ModelGateway
from council.engine.orchestrator import ReviewOrchestrator
from council.errors import CouncilError
from council.logging_config import configure_logging
from council.tools import REVIEW_TOOLS, list_review_config, run_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "code-council"


def register_review_tools(mcp: FastMCP, config: CouncilConfig, orchestrator: ReviewOrchestrator) -> None:
    """
    Register the review tools with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        config: Council configuration
        orchestrator: Orchestrator every tool runs through
    """

    async def dispatch(name: str, payload: dict[str, Any]) -> str:
        response = await run_tool(name, payload, orchestrator)
        if response.is_error:
            raise ToolError(response.text)
        return response.text

    @mcp.tool(name="review_code", description=REVIEW_TOOLS["review_code"].description)
    async def review_code(
        code: str, language: Optional[str] = None, context: Optional[str] = None
    ) -> str:
        return await dispatch("review_code", {"code": code, "language": language, "context": context})

    @mcp.tool(name="review_frontend", description=REVIEW_TOOLS["review_frontend"].description)
    async def review_frontend(
        code: str,
        framework: Optional[str] = None,
        review_type: Optional[Literal["accessibility", "performance", "ux", "full"]] = None,
        context: Optional[str] = None,
    ) -> str:
        return await dispatch(
            "review_frontend",
            {"code": code, "framework": framework, "review_type": review_type, "context": context},
        )

    @mcp.tool(name="review_backend", description=REVIEW_TOOLS["review_backend"].description)
    async def review_backend(
        code: str,
        language: Optional[str] = None,
        review_type: Optional[Literal["security", "performance", "architecture", "full"]] = None,
        context: Optional[str] = None,
    ) -> str:
        return await dispatch(
            "review_backend",
            {"code": code, "language": language, "review_type": review_type, "context": context},
        )

    @mcp.tool(name="review_plan", description=REVIEW_TOOLS["review_plan"].description)
    async def review_plan(
        plan: str,
        review_type: Optional[
            Literal["feasibility", "completeness", "risks", "timeline", "full"]
        ] = None,
        context: Optional[str] = None,
    ) -> str:
        return await dispatch(
            "review_plan", {"plan": plan, "review_type": review_type, "context": context}
        )

    @mcp.tool(name="review_git_changes", description=REVIEW_TOOLS["review_git_changes"].description)
    async def review_git_changes(
        review_type: Optional[Literal["staged", "unstaged", "diff", "commit"]] = None,
        commit_hash: Optional[str] = None,
        context: Optional[str] = None,
    ) -> str:
        return await dispatch(
            "review_git_changes",
            {"review_type": review_type, "commit_hash": commit_hash, "context": context},
        )

    @mcp.tool(name="list_review_config", description="Show current model configuration")
    def list_config() -> str:
        return list_review_config(config).text


def create_server(config: CouncilConfig, gateway: ModelGateway | None = None) -> FastMCP:
    """Create and configure the FastMCP server instance.

    Raises:
        ConfigurationError: If no gateway is given and no API key is configured.
    """
    if gateway is None:
        gateway = ModelGateway(config.require_api_key(), config.llm)

    mcp = FastMCP(name=SERVER_NAME)
    register_review_tools(mcp, config, ReviewOrchestrator(config, gateway))

    logger.info(
        "Server created",
        extra={
            "server": SERVER_NAME,
            "version": __version__,
            "code_review_models": list(config.code_models),
            "frontend_review_models": list(config.frontend_models),
            "backend_review_models": list(config.backend_models),
            "plan_review_models": list(config.plan_models),
        },
    )
    return mcp


def main() -> None:
    """Main entry point for the MCP stdio server."""
    load_dotenv()
    configure_logging()

    try:
        server = create_server(CouncilConfig.from_env())
    except CouncilError as exc:
        logger.error("Fatal error during server startup", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        print(
            "For MCP clients, add OPENROUTER_API_KEY to the 'env' section of your server config.",
            file=sys.stderr,
        )
        sys.exit(1)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)


if __name__ == "__main__":
    main()
