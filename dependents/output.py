import logging
import math
from collections import Counter
from pathlib import Path
from typing import Sequence

import ujson

from .models import Repository


def write_repositories(repositories: Sequence[Repository], path: str | Path):
    """Write the whole result set once, as a pretty-printed JSON array."""
    payload = [repo.model_dump() for repo in repositories]
    Path(path).write_text(
        ujson.dumps(payload, indent=2, ensure_ascii=False, escape_forward_slashes=False), encoding="utf-8"
    )


def star_statistics(repositories: Sequence[Repository]) -> tuple[int, int]:
    """Total and (rounded) average stars; the average of nothing is 0."""
    total = sum(repo.stars for repo in repositories)
    average = math.floor(total / len(repositories) + 0.5) if repositories else 0
    return total, average


def language_counts(repositories: Sequence[Repository], limit: int) -> list[tuple[str, int]]:
    counts = Counter(repo.language for repo in repositories if repo.language)
    return counts.most_common(limit)


def log_search_summary(repositories: Sequence[Repository], path: str | Path, top: int):
    logging.info(f"Successfully exported {len(repositories)} repositories to {path}")
    logging.info(f"Top {top} repositories by stars:")
    for index, repo in enumerate(repositories[:top], start=1):
        logging.info(f"{index}. {repo.full_name} - {repo.stars} stars")


def log_scrape_summary(
    repositories: Sequence[Repository], path: str | Path, top: int, languages: int
):
    logging.info(f"Successfully scraped {len(repositories)} repositories")
    logging.info(f"Saved results to {path}")

    logging.info(f"Top {top} repositories by stars:")
    for index, repo in enumerate(repositories[:top], start=1):
        logging.info(
            f"{index}. {repo.full_name:<40} {repo.stars:>7,} stars {repo.language or 'N/A'}"
        )

    total, average = star_statistics(repositories)
    logging.info("Statistics:")
    logging.info(f"   Total repositories: {len(repositories):,}")
    logging.info(f"   Total stars: {total:,}")
    logging.info(f"   Average stars: {average:,}")

    logging.info("Top languages:")
    for language, count in language_counts(repositories, languages):
        logging.info(f"   {language}: {count}")
