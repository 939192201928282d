import re
from typing import Callable

from storefront.core.errors import Conflict

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\-]+", re.ASCII)
_MULTI_HYPHEN = re.compile(r"--+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")

DEFAULT_MAX_ATTEMPTS = 10_000


def make_slug(text: str) -> str:
    """Turn free text into a URL-safe slug: ``"Hello, World!"`` -> ``"hello-world"``."""
    slug = (text or "").lower().strip()
    slug = _WHITESPACE.sub("-", slug)
    slug = _NON_WORD.sub("", slug)
    slug = _MULTI_HYPHEN.sub("-", slug)
    return _EDGE_HYPHENS.sub("", slug)


def unique_slug(
    candidate: str | None,
    fallback_name: str,
    exists: Callable[[str], bool],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """
    Slugify ``candidate`` (or ``fallback_name`` when no candidate is given) and
    append ``-1``, ``-2``, ... until ``exists`` reports the value as free.

    ``exists`` is the per-table lookup, so uniqueness is scoped to whichever
    table the caller checks against.
    """
    base = make_slug(candidate) if candidate else make_slug(fallback_name)
    slug = base
    counter = 1
    while exists(slug):
        if counter > max_attempts:
            raise Conflict(f"Could not find a free slug for '{base}'")
        slug = f"{base}-{counter}"
        counter += 1
    return slug
