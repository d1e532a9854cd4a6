"""
athena_mcp/__main__.py
======================

Process entry point: ``python -m athena_mcp`` or ``athena-mcp``.

MCP's stdio transport owns **stdout**, so all logging goes to stderr.  The
configuration is read exactly once here and installed as the shared
``Toolkit`` before the server starts accepting calls.
"""

import logging
import sys

from .config import Config
from .tool_definitions import mcp
from .tool_definitions.dispatch import set_toolkit
from .tools.toolkit import Toolkit

logger = logging.getLogger(__name__)


def main() -> None:
    config = Config.from_env()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    set_toolkit(Toolkit(config))
    logger.info(
        "AWS Athena MCP server running on stdio (region=%s, workgroup=%s)",
        config.aws_region,
        config.default_workgroup,
    )
    mcp.run()


if __name__ == "__main__":
    main()
