# streamfinder/cli.py

import asyncio
import sys

from .config import get_configuration, logger
from .services.tmdb_client import TMDBClient, TMDBError
from .workflows.cli_search import CliSearchFlow


async def run_cli() -> int:
    config = get_configuration(require_telegram=False)
    async with TMDBClient(
        config.tmdb_token,
        language=config.language,
        region=config.region,
        timeout=config.timeout,
    ) as client:
        flow = CliSearchFlow(client)
        try:
            await flow.run()
        except TMDBError as e:
            logger.error(f"[CLI] Search failed: {e}")
            print(f"Search failed: {e}")
            return 1
    return 0


def main() -> None:
    """Entry point for the interactive terminal search."""
    try:
        exit_code = asyncio.run(run_cli())
    except KeyboardInterrupt:
        print()
        exit_code = 130
    except EOFError:
        print()
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
