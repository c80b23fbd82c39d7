"""Review engine: gateway, parallel fan-out, orchestration, formatting."""

from council.engine.formatter import format_report, format_result, format_results
from council.engine.gateway import ModelGateway, extract_content
from council.engine.orchestrator import ReviewOrchestrator, ReviewReport
from council.engine.parallel import ModelResult, execute_all

__all__ = [
    "ModelGateway",
    "ModelResult",
    "ReviewOrchestrator",
    "ReviewReport",
    "execute_all",
    "extract_content",
    "format_report",
    "format_result",
    "format_results",
]
