import asyncio
import logging
import sys
import time

import aiohttp

from dependents.search import SearchConfig, run
from dependents.service import GitHubConfig, GitHubService, SearchAPIError


async def main() -> int:
    github_config = GitHubConfig()
    if not github_config.token:
        logging.error("GITHUB_TOKEN environment variable is required for the code search API")
        logging.error("Set it with: export GITHUB_TOKEN=your_token_here")
        logging.error("Create a token at: https://github.com/settings/tokens")
        return 1

    service = await GitHubService.create(github_config)
    try:
        await run(service, SearchConfig())
    except (SearchAPIError, aiohttp.ClientError, asyncio.TimeoutError) as e:
        logging.error(f"Error fetching repositories: {e}")
        return 1
    finally:
        await service.close()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logging.info("Starting...")
    start_time = time.time()
    exit_code = asyncio.run(main())
    logging.info(f"Execution time: {time.time() - start_time:.2f}s")
    sys.exit(exit_code)
