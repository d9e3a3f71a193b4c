"""Parse and serialize `.mdc` rules with a frontmatter metadata block."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional

import yaml

from rule_context.constants import (
    ALWAYS_APPLY_KEYS,
    DESCRIPTION_KEY,
    FRONTMATTER_DELIMITER,
    GLOBS_KEY,
    PATTERN_SEPARATOR,
    REFERENCE_TOKEN,
)
from rule_context.errors import MalformedMetadataError, RuleReadError
from rule_context.rules.globs import split_patterns
from rule_context.rules.models import Rule, RuleMetadata
from rule_context.utils import normalize_rule_id, rule_id_for

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\n(.*?)^---[ \t]*(?:\n|\Z)", re.DOTALL | re.MULTILINE
)
_LOOSE_LINE_RE = re.compile(r"^([A-Za-z_][\w-]*)[ \t]*:[ \t]*(.*)$")
_TRAILING_PUNCTUATION = ".,;:!?)]}'\""

REFERENCE_RE = re.compile(
    rf"(?<![\w@]){re.escape(REFERENCE_TOKEN)}[ \t]+(?P<target>\S+)"
)


def reference_at(match: re.Match) -> tuple[str, int]:
    """Return (normalized identifier, end offset) for one marker match.

    Sentence punctuation after the identifier is left in the body.
    """
    raw = match.group("target")
    stripped = raw.rstrip(_TRAILING_PUNCTUATION)
    return normalize_rule_id(stripped), match.start("target") + len(stripped)


def extract_references(body: str) -> tuple[str, ...]:
    references: list[str] = []
    for match in REFERENCE_RE.finditer(body):
        target, _ = reference_at(match)
        if target:
            references.append(target)
    return tuple(references)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "yes", "1", "on")


def _load_loose(block: str) -> dict[str, Any]:
    """Read Cursor-style `key: value` headers that are not valid YAML."""
    raw: dict[str, Any] = {}
    for line in block.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        match = _LOOSE_LINE_RE.match(line)
        if match is None:
            continue
        value = match.group(2).strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        raw[match.group(1)] = value
    return raw


def _load_metadata(block: str) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(block)
    except yaml.YAMLError:
        return _load_loose(block)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        return _load_loose(block)
    return raw


def parse_rule_text(
    rule_id: str, text: str, source_path: Optional[Path] = None
) -> Rule:
    """Parse one rule document. Same input always yields the same rule."""
    location = source_path or Path(rule_id)
    text = text.replace("\r\n", "\n").lstrip("\ufeff")

    match = _FRONTMATTER_RE.match(text)
    if match is None:
        raise MalformedMetadataError(location, "missing metadata block")

    raw = _load_metadata(match.group(1))
    body = text[match.end() :]

    missing = [key for key in (DESCRIPTION_KEY, GLOBS_KEY) if key not in raw]
    if missing:
        raise MalformedMetadataError(
            location, f"missing field{'s' if len(missing) > 1 else ''}: {', '.join(missing)}"
        )

    description = raw.get(DESCRIPTION_KEY)
    always_apply = False
    for key in ALWAYS_APPLY_KEYS:
        if key in raw:
            always_apply = _parse_bool(raw[key])
            break

    metadata = RuleMetadata(
        description="" if description is None else str(description).strip(),
        globs=split_patterns(raw.get(GLOBS_KEY)),
        always_apply=always_apply,
    )
    return Rule(
        id=rule_id,
        source_path=source_path,
        metadata=metadata,
        body=body,
        references=extract_references(body),
    )


def parse_rule(path: Path, root: Path) -> Rule:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RuleReadError(path, str(exc)) from exc
    return parse_rule_text(rule_id_for(path, root), text, source_path=path)


def serialize_rule(rule: Rule) -> str:
    parts: list[str] = [FRONTMATTER_DELIMITER]
    parts.append(f"{DESCRIPTION_KEY}: {rule.metadata.description}")
    parts.append(f"{GLOBS_KEY}: {PATTERN_SEPARATOR.join(rule.metadata.globs)}")
    if rule.metadata.always_apply:
        parts.append(f"{ALWAYS_APPLY_KEYS[0]}: true")
    parts.append(FRONTMATTER_DELIMITER)
    parts.append(rule.body)
    return "\n".join(parts)
