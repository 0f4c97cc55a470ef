"""
Code search collector.
Pages through GitHub code search for a phrase in a given filename, gathers the distinct owning repositories,
then looks up each repository for its stars and metadata. Strictly sequential, paced for the 10 requests/minute
limit of the code search API.
"""

import asyncio
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import SearchedRepository, StopReason
from .output import log_search_summary, write_repositories
from .service import GitHubService
from .util import sort_by_stars


class SearchConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="SEARCH_", extra="ignore"
    )

    phrase: str = "viem"
    filename: str = "package.json"
    exclude_archived: bool = True

    # Code search returns at most 1,000 results: 10 pages of 100
    per_page: int = 100
    max_pages: int = 10
    # Code search allows 10 requests/minute
    page_delay: float = 7

    output_path: str = "./viem_repositories.json"
    top_count: int = 5

    @property
    def query(self) -> str:
        parts = [self.phrase, f"filename:{self.filename}"]
        if self.exclude_archived:
            parts.append("-is:archived")
        return " ".join(parts)


async def collect_repository_names(
    service: GitHubService, config: SearchConfig
) -> tuple[set[str], StopReason]:
    names: set[str] = set()
    logging.info(
        f"Fetching code search results (up to {config.per_page * config.max_pages:,} files)..."
    )

    for page in range(1, config.max_pages + 1):
        data = await service.search_code(config.query, page, config.per_page)
        items = data.get("items", [])

        if page == 1:
            logging.info(f"Found {data.get('total_count', 0):,} total files")

        names.update(item["repository"]["full_name"] for item in items)
        logging.info(
            f"Page {page}/{config.max_pages}: {len(items)} files, {len(names)} unique repos so far"
        )

        if len(items) < config.per_page:
            logging.info("Reached last page of results")
            return names, StopReason.SHORT_PAGE

        if page < config.max_pages:
            await asyncio.sleep(config.page_delay)

    return names, StopReason.MAX_PAGES_REACHED


async def fetch_repository(
    service: GitHubService, full_name: str
) -> SearchedRepository | None:
    try:
        data = await service.get_repository(full_name)
        if data is None:
            return None
        return SearchedRepository(
            name=data["name"],
            full_name=data["full_name"],
            description=data.get("description"),
            stars=data["stargazers_count"],
            url=data["html_url"],
            language=data.get("language"),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
    except Exception as e:
        logging.error(f"Error fetching {full_name}: {e}")
        return None


async def fetch_repository_details(
    service: GitHubService, names: set[str]
) -> list[SearchedRepository]:
    # Repository API allows 5,000 requests/hour, so no pacing here
    repositories: list[SearchedRepository] = []
    for full_name in names:
        if repo := await fetch_repository(service, full_name):
            repositories.append(repo)
            if len(repositories) % 50 == 0:
                logging.info(f"Fetched {len(repositories)}/{len(names)} repositories...")
    return repositories


async def collect_repositories(
    service: GitHubService, config: SearchConfig
) -> list[SearchedRepository]:
    logging.info(
        f'Searching GitHub for repositories with "{config.phrase}" in {config.filename}...'
    )

    names, reason = await collect_repository_names(service, config)
    logging.info(f"Found {len(names)} unique repositories ({reason.value})")

    logging.info("Fetching full repository details...")
    repositories = await fetch_repository_details(service, names)
    logging.info(f"Successfully fetched details for {len(repositories)} repositories")

    return sort_by_stars(repositories)


async def run(service: GitHubService, config: SearchConfig) -> list[SearchedRepository]:
    repositories = await collect_repositories(service, config)
    write_repositories(repositories, config.output_path)
    log_search_summary(repositories, config.output_path, config.top_count)
    return repositories
