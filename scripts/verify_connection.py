"""
scripts/verify_connection.py
============================

Smoke-test the AWS setup the server will run with.

1. ``aws sts get-caller-identity`` through the AWS CLI, with the same
   credential/region overlay the server uses (``Config.aws_env()``).
2. ``SELECT 1`` through ``QueryRunner`` against the configured workgroup.

Usage::

    python scripts/verify_connection.py
"""

import asyncio
import json
import os
import subprocess
import sys

# Add the current directory to sys.path so we can import the package
sys.path.append(os.getcwd())

from athena_mcp.config import Config  # noqa: E402
from athena_mcp.tools.errors import AthenaToolError  # noqa: E402
from athena_mcp.tools.query_runner import QueryRequest  # noqa: E402
from athena_mcp.tools.toolkit import Toolkit  # noqa: E402


def verify_identity(config: Config) -> bool:
    print("Checking AWS identity...")
    try:
        output = subprocess.run(
            ["aws", "sts", "get-caller-identity", "--output", "json"],
            env=config.aws_env(),
            capture_output=True,
            text=True,
            check=True,
        ).stdout
    except FileNotFoundError:
        print("⚠️ AWS CLI not installed, skipping identity check.")
        return True
    except subprocess.CalledProcessError as e:
        print(f"❌ Identity check failed: {e.stderr.strip() or e}")
        return False
    identity = json.loads(output)
    print(f"✅ Authenticated as {identity.get('Arn')}")
    return True


async def verify_athena(toolkit: Toolkit) -> bool:
    print(f"\nRunning SELECT 1 in workgroup {toolkit.config.default_workgroup}...")
    try:
        result_set = await toolkit.queries.execute(QueryRequest(query="SELECT 1"))
    except AthenaToolError as e:
        print(f"❌ Athena query failed ({e.kind}): {e.message}")
        return False
    print(f"✅ Athena query succeeded: {result_set.get('Rows')}")
    return True


async def main() -> int:
    config = Config.from_env()
    print("Configuration:", json.dumps(config.public_summary(), indent=2))

    identity_ok = verify_identity(config)
    athena_ok = await verify_athena(Toolkit(config))

    if identity_ok and athena_ok:
        print("\n🎉 Verification Complete: All systems go!")
        return 0
    print("\n⚠️ Verification Completed with Issues.")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
