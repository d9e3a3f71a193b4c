"""Glob matching of rule patterns against candidate file paths.

A pattern without a `/` is compared with the base name of the candidate,
wherever the file lives. A pattern with a `/` is compared with the whole
relative path one segment at a time, so `*`, `?` and `[...]` never cross
directory boundaries; a `**` segment stands for any number of segments.
A leading `/` or `./` anchors an otherwise bare pattern to the root.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from functools import lru_cache
from typing import Any, Iterable

from rule_context.constants import PATTERN_SEPARATOR, RECURSIVE_WILDCARD


def split_patterns(value: Any) -> tuple[str, ...]:
    """Flatten a `globs` value (comma string or list) into stripped patterns.

    Empty items are kept so the loader can report them.
    """
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        items: list[str] = []
        for item in value:
            items.extend(split_patterns("" if item is None else str(item)))
        return tuple(items)
    text = str(value).strip()
    if not text:
        return ()
    return tuple(item.strip().strip("'\"") for item in text.split(PATTERN_SEPARATOR))


def _normalize_path(path: str) -> str:
    text = path.replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    return text


@lru_cache(maxsize=1024)
def _pattern_segments(pattern: str) -> tuple[str, ...]:
    text = _normalize_path(pattern).lstrip("/")
    segments: list[str] = []
    for segment in text.split("/"):
        if not segment:
            continue
        if segment == RECURSIVE_WILDCARD and segments and segments[-1] == RECURSIVE_WILDCARD:
            continue
        segments.append(segment)
    return tuple(segments)


def _match_segments(pattern: tuple[str, ...], parts: tuple[str, ...]) -> bool:
    # Iterative matcher with single-point backtracking on the last `**`.
    p_index = 0
    s_index = 0
    star_p = -1
    star_s = -1
    while s_index < len(parts):
        if p_index < len(pattern) and pattern[p_index] == RECURSIVE_WILDCARD:
            star_p = p_index
            star_s = s_index
            p_index += 1
        elif p_index < len(pattern) and fnmatchcase(parts[s_index], pattern[p_index]):
            p_index += 1
            s_index += 1
        elif star_p != -1:
            p_index = star_p + 1
            star_s += 1
            s_index = star_s
        else:
            return False
    while p_index < len(pattern) and pattern[p_index] == RECURSIVE_WILDCARD:
        p_index += 1
    return p_index == len(pattern)


def match_single(pattern: str, path: str, case_sensitive: bool = True) -> bool:
    pattern = pattern.strip()
    if not pattern or not path:
        return False
    if not case_sensitive:
        pattern = pattern.casefold()
        path = path.casefold()

    normalized = _normalize_path(path)
    # `/*.py` and `./*.py` are rooted, so the separator test runs on the raw text.
    if "/" not in pattern.replace("\\", "/"):
        base_name = normalized.rstrip("/").rsplit("/", 1)[-1]
        return fnmatchcase(base_name, pattern)

    parts = tuple(part for part in normalized.split("/") if part)
    return _match_segments(_pattern_segments(pattern), parts)


def matches(pattern: str, path: str, case_sensitive: bool = True) -> bool:
    """True when any comma-separated alternative of `pattern` matches `path`."""
    return any(
        match_single(item, path, case_sensitive=case_sensitive)
        for item in split_patterns(pattern)
    )


def matches_any(
    patterns: Iterable[str], path: str, case_sensitive: bool = True
) -> bool:
    return any(matches(pattern, path, case_sensitive=case_sensitive) for pattern in patterns)
