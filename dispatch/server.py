"""
dispatch MCP Server

Exposes the distribution engine via Model Context Protocol (MCP).
"""

import logging
import os
from typing import Any, Dict, Optional

from fastmcp import FastMCP
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

from dispatch.policy.rules import ConfigurationError, parse_settings
from dispatch.workflows.service import TaskNotFoundError, get_default_service

# Create MCP server
mcp = FastMCP(
    name="dispatch",
    instructions="""
    You are the dispatch assignment assistant.

    You help operators place maintenance tasks with staff by:
    - Running distribution passes that auto-assign confident matches
    - Previewing the ranked candidates for a single task
    - Assigning a task manually when the operator has decided
    - Reporting the counters of the last distribution pass
    """
)


# =============================================================================
# Distribution Tools
# =============================================================================

@mcp.tool
def run_distribution(settings: Optional[Dict[str, Any]] = None) -> dict:
    """
    Run one distribution pass over all pending tasks.

    Args:
        settings: Optional overrides, e.g. {"auto_assign_threshold": 90,
                  "skill_matching": "strict"}

    Returns:
        Per-task outcomes and the pass statistics.
    """
    service = get_default_service()
    try:
        merged = parse_settings({**service.settings.model_dump(), **(settings or {})})
    except ConfigurationError as e:
        return {"success": False, "error": str(e), "problems": e.problems}
    return service.run_batch(merged).model_dump(mode="json")


@mcp.tool
def recommend_task(task_id: str) -> dict:
    """
    Rank the candidates for one task without assigning it.

    Returns primary_choice, alternate_choices, confidence and reasoning.
    """
    try:
        return get_default_service().recommend(task_id).model_dump(mode="json")
    except TaskNotFoundError as e:
        return {"success": False, "error": str(e)}


@mcp.tool
def assign_task(task_id: str, staff_id: str) -> dict:
    """
    Assign a task to a staff member, bypassing the auto-assign threshold.

    Returns status "ok", "already_assigned" or "not_found".
    """
    return get_default_service().commit(task_id, staff_id).model_dump(mode="json")


@mcp.tool
def get_distribution_stats() -> dict:
    """Counters of the last distribution pass, including manual overrides since."""
    return get_default_service().get_stats().model_dump(mode="json")


# =============================================================================
# Run Server
# =============================================================================

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Run dispatch MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport type: stdio (local) or http (network)"
    )
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (HTTP transport)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (HTTP transport)")

    args = parser.parse_args()

    if args.transport == "http":
        logging.getLogger(__name__).info(f"Starting dispatch MCP server on {args.host}:{args.port}")
        mcp.run(transport="http", host=args.host, port=args.port)
    else:
        mcp.run()
