"""Shared test fixtures: an in-memory stand-in for GitHubService and listing-page HTML."""

import pytest

from dependents.service import GitHubConfig, SearchAPIError


class FakeGitHubService:
    """Serves canned responses and records every request it receives."""

    def __init__(self, search_pages=None, repositories=None, dependents_pages=None):
        self.settings = GitHubConfig(_env_file=None, token="test-token")
        self.search_pages = search_pages or []
        self.repositories = repositories or {}
        self.dependents_pages = list(dependents_pages or [])
        self.search_calls: list[int] = []
        self.repository_calls: list[str] = []
        self.page_calls: list[str] = []

    def dependents_url(self, owner, repo):
        return f"https://github.com/{owner}/{repo}/network/dependents"

    async def search_code(self, query, page, per_page):
        self.search_calls.append(page)
        response = self.search_pages[page - 1]
        if isinstance(response, Exception):
            raise response
        return response

    async def get_repository(self, full_name):
        self.repository_calls.append(full_name)
        response = self.repositories.get(full_name)
        if isinstance(response, Exception):
            raise response
        return response

    async def get_dependents_page(self, url):
        self.page_calls.append(url)
        if not self.dependents_pages:
            return None
        response = self.dependents_pages.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def search_page(names, total_count=None):
    return {
        "total_count": total_count if total_count is not None else len(names),
        "incomplete_results": False,
        "items": [
            {"name": "package.json", "path": "package.json", "repository": {"full_name": name}}
            for name in names
        ],
    }


def repository_payload(full_name, stars, language="TypeScript", description=None):
    return {
        "name": full_name.split("/")[1],
        "full_name": full_name,
        "description": description,
        "stargazers_count": stars,
        "html_url": f"https://github.com/{full_name}",
        "language": language,
        "created_at": "2023-01-01T00:00:00Z",
        "updated_at": "2024-06-01T00:00:00Z",
    }


def dependents_row(full_name, stars="0", description=None, language=None):
    owner, name = full_name.split("/")
    parts = [
        '<div class="Box-row d-flex flex-items-center" data-test-id="dg-repo-pkg-dependent">',
        '<span class="f5 color-fg-muted" data-repository-hovercards-enabled>',
        f'<a data-hovercard-type="user" href="/{owner}">{owner}</a> / ',
        f'<a class="text-bold" data-hovercard-type="repository" href="/{full_name}">{name}</a>',
        "</span>",
    ]
    if description:
        parts.append(f'<span class="px-1">{description}</span>')
    if language:
        parts.append(f'<span itemprop="programmingLanguage">{language}</span>')
    parts += [
        '<div class="d-flex flex-auto flex-justify-end">',
        f'<span class="color-fg-muted text-bold pl-3"><svg class="octicon octicon-star"></svg> {stars}</span>',
        '<span class="color-fg-muted text-bold pl-3"><svg class="octicon octicon-repo-forked"></svg> 3</span>',
        "</div>",
        "</div>",
    ]
    return "".join(parts)


def dependents_page(rows, next_href=None, next_disabled=False):
    if next_href is None:
        pagination = '<button class="btn BtnGroup-item" disabled>Next</button>'
    elif next_disabled:
        pagination = f'<a class="btn BtnGroup-item disabled" href="{next_href}">Next</a>'
    else:
        pagination = f'<a class="btn BtnGroup-item" href="{next_href}">Next</a>'
    return (
        "<html><body><div id=\"dependents\">"
        '<div class="Box"><div class="Box-header">Repositories</div>'
        + "".join(rows)
        + "</div>"
        '<div class="paginate-container"><div class="BtnGroup">'
        '<a class="btn BtnGroup-item" href="/prev">Previous</a>'
        + pagination
        + "</div></div></div></body></html>"
    )


@pytest.fixture
def fake_service():
    return FakeGitHubService


@pytest.fixture
def make_search_page():
    return search_page


@pytest.fixture
def make_repository_payload():
    return repository_payload


@pytest.fixture
def make_row():
    return dependents_row


@pytest.fixture
def make_page():
    return dependents_page


@pytest.fixture
def forbidden():
    return SearchAPIError(403, '{"message": "API rate limit exceeded"}')
