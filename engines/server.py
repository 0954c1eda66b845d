"""
WageCheck Compliance Engine - MCP Server

FastMCP server exposing wage & hour compliance tools:
- evaluate_wage: binding minimum wage check for one worker
- evaluate_overtime: daily/weekly overtime owed for one pay period
- run_compliance_scan: fleet-wide score, at-risk count and findings
"""

import logging

from engines.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# Importing the tool module registers the tools with the MCP server
from engines.tools.compliance_engine import mcp  # noqa: E402


def main():
    """Run the MCP server."""
    logger.info(f"Starting {settings.app_name} MCP Server (rules: {settings.rule_file_path})")
    mcp.run()


if __name__ == "__main__":
    main()
