import logging
import time
from urllib.parse import quote, urlencode

import aiohttp
import ujson
from pydantic_settings import BaseSettings, SettingsConfigDict


class GitHubConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="GITHUB_", extra="ignore"
    )

    api_url: str = "https://api.github.com"
    web_url: str = "https://github.com"
    # Only the code search API needs it; the dependents page is public HTML
    token: str | None = None
    api_version: str = "2022-11-28"
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )


class SearchAPIError(Exception):
    """Raised when the code search endpoint answers with a non-200 status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"GitHub API error: {status}\n{body}")


class GitHubService:
    def __init__(self, config: GitHubConfig, session: aiohttp.ClientSession):
        self.settings = config
        self.session = session

    @classmethod
    async def create(cls, config: GitHubConfig | None = None):
        config = config or GitHubConfig()
        session = aiohttp.ClientSession()
        return cls(config, session)

    async def close(self):
        await self.session.close()

    def api_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.settings.token}"}

    def search_headers(self) -> dict:
        return {
            **self.api_headers(),
            "Accept": "application/vnd.github.text-match+json",
            "X-GitHub-Api-Version": self.settings.api_version,
        }

    def browser_headers(self) -> dict:
        # The dependents listing is an HTML page, not an API, so look like a browser.
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "none",
            "Cache-Control": "max-age=0",
        }

    def search_url(self, query: str, page: int, per_page: int) -> str:
        params = urlencode(
            {"q": query, "per_page": per_page, "page": page}, quote_via=quote
        )
        return f"{self.settings.api_url}/search/code?{params}"

    def dependents_url(self, owner: str, repo: str) -> str:
        return f"{self.settings.web_url}/{owner}/{repo}/network/dependents"

    async def search_code(self, query: str, page: int, per_page: int) -> dict:
        request_start = time.time()
        async with self.session.get(
            self.search_url(query, page, per_page), headers=self.search_headers()
        ) as response:
            logging.info(f"Search query time: {time.time() - request_start:.2f}s")
            if response.status != 200:
                raise SearchAPIError(response.status, await response.text())
            return await response.json(loads=ujson.loads, content_type=None)

    async def get_repository(self, full_name: str) -> dict | None:
        async with self.session.get(
            f"{self.settings.api_url}/repos/{full_name}", headers=self.api_headers()
        ) as response:
            if response.status != 200:
                logging.warning(f"Error fetching {full_name}: {response.status}")
                return None
            return await response.json(loads=ujson.loads, content_type=None)

    async def get_dependents_page(self, url: str) -> str | None:
        async with self.session.get(url, headers=self.browser_headers()) as response:
            if response.status != 200:
                logging.error(f"Failed to fetch {url}: {response.status}")
                return None
            return await response.text(errors="replace")
