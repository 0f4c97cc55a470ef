import math
import random
import re
from typing import Iterable, TypeVar

from .models import Repository

R = TypeVar("R", bound=Repository)

_DECIMAL_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)")
_INTEGER_PREFIX = re.compile(r"^[+-]?\d+")


def parse_star_count(text: str) -> int:
    """
    Turn a rendered star count ("1,234", "1.2k", "3m") into an integer.
    Suffixed values round half up; anything unparseable is 0.
    """
    cleaned = re.sub(r"[,\s]", "", text or "")
    lowered = cleaned.lower()

    if "k" in lowered or "m" in lowered:
        match = _DECIMAL_PREFIX.match(cleaned)
        if not match:
            return 0
        multiplier = 1_000 if "k" in lowered else 1_000_000
        return max(0, math.floor(float(match.group()) * multiplier + 0.5))

    match = _INTEGER_PREFIX.match(cleaned)
    return max(0, int(match.group())) if match else 0


def sort_by_stars(repositories: Iterable[R]) -> list[R]:
    return sorted(repositories, key=lambda repo: repo.stars, reverse=True)


def polite_delay(low: float, high: float) -> float:
    return random.uniform(low, high)
