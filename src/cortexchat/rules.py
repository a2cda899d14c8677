"""Ordered (predicate, result) rule tables."""

from __future__ import annotations

import re
from typing import Any, Callable, NamedTuple, TypeVar

R = TypeVar("R")


class Rule(NamedTuple):
    predicate: Callable[[str], bool]
    result: Any


def pattern(regex: str, flags: int = 0) -> Callable[[str], bool]:
    """Predicate that is true when ``regex`` matches anywhere in the text."""
    compiled = re.compile(regex, flags)
    return lambda text: compiled.search(text) is not None


def contains_any(*needles: str) -> Callable[[str], bool]:
    """Case-insensitive substring predicate."""
    return lambda text: any(n in text.lower() for n in needles)


def first_match(rules: list[Rule], text: str, default: R) -> R:
    """Return the result of the first rule whose predicate accepts ``text``."""
    for rule in rules:
        if rule.predicate(text):
            return rule.result
    return default
