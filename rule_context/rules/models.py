"""Rule data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from rule_context.errors import ResolutionError, RuleFileError


@dataclass(frozen=True)
class RuleMetadata:
    description: str = ""
    globs: tuple[str, ...] = ()
    always_apply: bool = False

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(pattern for pattern in self.globs if pattern)


@dataclass(frozen=True)
class Rule:
    id: str
    source_path: Optional[Path]
    metadata: RuleMetadata
    body: str
    references: tuple[str, ...] = ()

    @property
    def is_matchable(self) -> bool:
        return self.metadata.always_apply or bool(self.metadata.patterns)


@dataclass
class LoadReport:
    root: Path
    loaded: list[str] = field(default_factory=list)
    errors: list[RuleFileError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> dict[str, int]:
        return {
            "loaded": len(self.loaded),
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "skipped": len(self.skipped),
        }


@dataclass(frozen=True)
class RuleSnapshot:
    """Immutable index over one full scan of a rules root."""

    root: Path
    rules: dict[str, Rule]
    pattern_index: dict[str, tuple[str, ...]]
    always: tuple[str, ...] = ()

    def get(self, rule_id: str) -> Optional[Rule]:
        return self.rules.get(rule_id)

    @property
    def ids(self) -> list[str]:
        return sorted(self.rules)

    def __len__(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class MatchContext:
    target_path: str
    relative_path: str


@dataclass(eq=False)
class ResolvedNode:
    """One expansion of a rule: its own text fragments interleaved with the
    nodes of the documents it references, in body order."""

    rule_id: str
    parts: list[Union[str, "ResolvedNode"]] = field(default_factory=list)

    @property
    def text(self) -> str:
        rendered: dict[int, str] = {}

        def _render(node: ResolvedNode) -> str:
            key = id(node)
            if key not in rendered:
                rendered[key] = "".join(
                    part if isinstance(part, str) else _render(part) for part in node.parts
                )
            return rendered[key]

        return _render(self)

    def iter_rule_ids(self) -> list[str]:
        seen: list[str] = []
        stack: list[ResolvedNode] = [self]
        visited: set[int] = set()
        while stack:
            node = stack.pop()
            if id(node) in visited:
                continue
            visited.add(id(node))
            if node.rule_id not in seen:
                seen.append(node.rule_id)
            children = [part for part in node.parts if isinstance(part, ResolvedNode)]
            stack.extend(reversed(children))
        return seen


@dataclass(frozen=True)
class ResolvedBody:
    rule_id: str
    node: ResolvedNode
    diagnostics: tuple[ResolutionError, ...] = ()

    @property
    def text(self) -> str:
        return self.node.text


@dataclass(frozen=True)
class ContextSegment:
    rule_id: str
    origin_id: str
    text: str


@dataclass(frozen=True)
class ContextBundle:
    target_path: str
    matched: tuple[str, ...] = ()
    segments: tuple[ContextSegment, ...] = ()
    diagnostics: tuple[ResolutionError, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def text(self) -> str:
        blocks: dict[str, str] = {}
        for segment in self.segments:
            blocks[segment.origin_id] = blocks.get(segment.origin_id, "") + segment.text
        return "\n\n".join(block.strip() for block in blocks.values() if block.strip())

    @property
    def rule_ids(self) -> list[str]:
        ordered: list[str] = []
        for segment in self.segments:
            if segment.rule_id not in ordered:
                ordered.append(segment.rule_id)
        return ordered

    def as_dict(self) -> dict:
        return {
            "target": self.target_path,
            "matched": list(self.matched),
            "segments": [
                {"rule": item.rule_id, "origin": item.origin_id, "text": item.text}
                for item in self.segments
            ],
            "diagnostics": [str(item) for item in self.diagnostics],
        }
