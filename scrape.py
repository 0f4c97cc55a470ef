import asyncio
import logging
import time

from dependents.scraper import ScraperConfig, run
from dependents.service import GitHubService


def log_banner(config: ScraperConfig):
    logging.info("=" * 56)
    logging.info("GitHub Dependents Scraper")
    logging.info(f"Scraping: {config.owner}/{config.repo}")
    logging.info("=" * 56)


async def main():
    config = ScraperConfig()
    log_banner(config)

    service = await GitHubService.create()
    try:
        await run(service, config)
    finally:
        await service.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logging.info("Starting...")
    start_time = time.time()
    asyncio.run(main())
    logging.info(f"Execution time: {time.time() - start_time:.2f}s")
