"""
Dependents page scraper.
Walks the server-rendered "Used by" listing of a repository, following the "Next" button until the listing runs out.
There is no API behind this page, so parsing is tied to GitHub's current markup and will break if it changes.
"""

import asyncio
import logging
from urllib.parse import urljoin

import aiohttp
from bs4 import BeautifulSoup, Tag
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Repository, StopReason
from .output import log_scrape_summary, write_repositories
from .service import GitHubService
from .util import parse_star_count, polite_delay, sort_by_stars

ROW_SELECTOR = "#dependents .Box .Box-row"


class ScraperConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="SCRAPER_", extra="ignore"
    )

    owner: str = "wevm"
    repo: str = "viem"
    # None scrapes until the listing runs out
    max_pages: int | None = Field(default=None, ge=1)

    # Randomised pause between pages, in seconds
    min_delay: float = 2.0
    max_delay: float = 3.0

    output_path: str = "./viem_dependents_scraped.json"
    top_count: int = 10
    language_count: int = 5


def _text(row: Tag, selector: str) -> str | None:
    return "".join(el.get_text() for el in row.select(selector)).strip() or None


def parse_repository_row(row: Tag, web_url: str = "https://github.com") -> Repository | None:
    link = row.select_one('a[data-hovercard-type="repository"]')
    href = link.get("href") if link else None
    if not href:
        return None

    full_name = href.replace("/", "", 1).strip()
    owner, _, name = full_name.partition("/")
    if not owner or not name or "/" in name:
        logging.warning(f"Skipping unparseable repository link: {href}")
        return None

    star_icon = row.select_one("svg.octicon-star")
    stars_text = star_icon.parent.get_text(strip=True) if star_icon and star_icon.parent else ""

    return Repository(
        name=name,
        full_name=full_name,
        description=_text(row, "span.px-1"),
        stars=parse_star_count(stars_text),
        url=f"{web_url}/{full_name}",
        language=_text(row, 'span[itemprop="programmingLanguage"]'),
    )


def find_next_href(soup: BeautifulSoup) -> str | None:
    for button in soup.select("a.BtnGroup-item"):
        if "Next" not in button.get_text():
            continue
        if "disabled" in (button.get("class") or []):
            return None
        return button.get("href") or None
    return None


def parse_dependents_page(
    html: str, web_url: str = "https://github.com"
) -> tuple[list[Repository], str | None, int]:
    """
    Parse one listing page.
    Returns the successfully parsed repositories, the raw href of the next page (None at the end),
    and how many rows the page had, so callers can tell an empty page from one with bad rows.
    """
    soup = BeautifulSoup(html, "html.parser")
    rows = soup.select(ROW_SELECTOR)

    repositories: list[Repository] = []
    for index, row in enumerate(rows):
        try:
            if repo := parse_repository_row(row, web_url):
                repositories.append(repo)
        except Exception as e:
            logging.error(f"Error parsing repository at index {index}: {e}")

    return repositories, find_next_href(soup), len(rows)


async def scrape_dependents(
    service: GitHubService, config: ScraperConfig
) -> tuple[list[Repository], StopReason]:
    repositories: list[Repository] = []
    next_url = service.dependents_url(config.owner, config.repo)
    current_page = 1

    logging.info(f"Starting to scrape dependents for {config.owner}/{config.repo}...")

    while True:
        logging.info(f"Fetching page {current_page}: {next_url}")
        try:
            html = await service.get_dependents_page(next_url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, LookupError) as e:
            logging.error(f"Error on page {current_page}: {e}")
            html = None
        if html is None:
            reason = StopReason.FETCH_FAILED
            break

        page_repos, next_href, row_count = parse_dependents_page(
            html, service.settings.web_url
        )
        logging.info(f"Found {row_count} repositories on this page")
        if row_count == 0:
            logging.info("No more repositories found. Stopping.")
            reason = StopReason.EMPTY_PAGE
            break

        repositories.extend(page_repos)
        logging.info(f"Total repositories collected so far: {len(repositories)}")

        if not next_href:
            logging.info("No more pages available.")
            reason = StopReason.NO_NEXT_LINK
            break

        if config.max_pages is not None and current_page >= config.max_pages:
            logging.info(f"Reached page limit of {config.max_pages}")
            reason = StopReason.MAX_PAGES_REACHED
            break

        next_url = urljoin(next_url, next_href)
        current_page += 1

        delay = polite_delay(config.min_delay, config.max_delay)
        logging.info(f"Waiting {delay:.1f}s before next request...")
        await asyncio.sleep(delay)

    logging.info(f"Scraping stopped on page {current_page} ({reason.value})")
    return sort_by_stars(repositories), reason


async def run(service: GitHubService, config: ScraperConfig) -> list[Repository]:
    repositories, _ = await scrape_dependents(service, config)
    write_repositories(repositories, config.output_path)
    log_scrape_summary(
        repositories, config.output_path, config.top_count, config.language_count
    )
    return repositories
