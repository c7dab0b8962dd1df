"""Naming utilities for code generation."""

from __future__ import annotations

import re
from functools import lru_cache

# Common irregular plurals
_IRREGULAR_PLURALS: dict[str, str] = {
    "children": "child",
    "people": "person",
    "men": "man",
    "women": "woman",
    "mice": "mouse",
    "geese": "goose",
    "teeth": "tooth",
    "feet": "foot",
    "data": "datum",
    "criteria": "criterion",
    "analyses": "analysis",
    "indices": "index",
    "appendices": "appendix",
    "matrices": "matrix",
    "vertices": "vertex",
}
_IRREGULAR_SINGULARS: dict[str, str] = {
    singular: plural for plural, singular in _IRREGULAR_PLURALS.items()
}

_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+|[0-9]+")
_TRAILING_WORD = re.compile(r"([A-Z]?[a-z]+|[A-Z]+)$")


def _split_words(value: str) -> list[str]:
    """Split an identifier-ish string into words on separators and case changes."""
    words: list[str] = []
    for chunk in re.split(r"[^a-zA-Z0-9]+", value):
        words.extend(_WORD_PATTERN.findall(chunk))
    return words


def _match_case(template: str, word: str) -> str:
    if template.isupper() and len(template) > 1:
        return word.upper()
    if template[:1].isupper():
        return word.capitalize()
    return word


@lru_cache(maxsize=1024)
def singularize(name: str) -> str:
    """Convert a plural word to singular form.

    Uses caching for repeated calls with the same input.
    """
    # Check irregular plurals first
    lower = name.lower()
    if lower in _IRREGULAR_PLURALS:
        # Preserve original case pattern
        singular = _IRREGULAR_PLURALS[lower]
        if name[0].isupper():
            return singular.capitalize()
        return singular

    # Apply rules in order of specificity
    if name.endswith("ies") and len(name) > 3:
        return name[:-3] + "y"
    if name.endswith(("ses", "xes", "zes")) and len(name) > 3:
        return name[:-2]
    if name.endswith(("ches", "shes")) and len(name) > 4:
        return name[:-2]
    if name.endswith("s") and not name.endswith(("ss", "us", "is")) and len(name) > 1:
        return name[:-1]
    return name


@lru_cache(maxsize=1024)
def pluralize(name: str, count: int = 2) -> str:
    """Inflect ``name`` for ``count`` items.

    Only the trailing word of a compound name is inflected, so
    ``"HttpMethod"`` becomes ``"HttpMethods"``. A count of one yields the
    singular form.
    """
    if count == 1:
        return singularize(name)

    match = _TRAILING_WORD.search(name)
    if match is None:
        return name
    head, word = name[: match.start()], match.group(0)
    lower = word.lower()

    if lower in _IRREGULAR_SINGULARS:
        return head + _match_case(word, _IRREGULAR_SINGULARS[lower])
    if lower in _IRREGULAR_PLURALS:
        return name
    if lower.endswith("is") and len(lower) > 2:
        plural = lower[:-2] + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    elif lower.endswith(("s", "x", "z", "ch", "sh")):
        plural = lower + "es"
    else:
        plural = lower + "s"
    return head + _match_case(word, plural)


@lru_cache(maxsize=1024)
def to_lower_camel_case(value: str) -> str:
    """Convert a string to lowerCamelCase.

    Examples:
        >>> to_lower_camel_case("webgraph_host_ingoing")
        'webgraphHostIngoing'
        >>> to_lower_camel_case("users_{id}")
        'usersId'
    """
    words = _split_words(value)
    if not words:
        return ""
    first, *rest = words
    return first.lower() + "".join(word.capitalize() for word in rest)


@lru_cache(maxsize=1024)
def to_shouty_snake_case(value: str) -> str:
    """Convert a string to SHOUTY_SNAKE_CASE.

    Examples:
        >>> to_shouty_snake_case("HttpMethods")
        'HTTP_METHODS'
    """
    return "_".join(word.upper() for word in _split_words(value))
