from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    full_name: str
    description: str | None = None
    stars: int = Field(default=0, ge=0)
    url: str
    language: str | None = None


class SearchedRepository(Repository):
    created_at: str
    updated_at: str


class StopReason(Enum):
    MAX_PAGES_REACHED = "max_pages_reached"
    SHORT_PAGE = "short_page"
    NO_NEXT_LINK = "no_next_link"
    EMPTY_PAGE = "empty_page"
    FETCH_FAILED = "fetch_failed"
