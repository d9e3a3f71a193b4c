"""Build the context bundle for one target file."""

from __future__ import annotations

import logging
from pathlib import Path

from rule_context.rules.models import ContextBundle, ContextSegment, ResolvedNode
from rule_context.rules.resolver import ReferenceResolver
from rule_context.rules.store import RuleStore

logger = logging.getLogger(__name__)


def _emit(
    node: ResolvedNode,
    origin_id: str,
    emitted: set[str],
    segments: list[ContextSegment],
) -> None:
    # A document contributes once, at its first position.
    if node.rule_id in emitted:
        return
    emitted.add(node.rule_id)
    for part in node.parts:
        if isinstance(part, ResolvedNode):
            _emit(part, origin_id, emitted, segments)
        else:
            segments.append(
                ContextSegment(rule_id=node.rule_id, origin_id=origin_id, text=part)
            )


class ContextAssembler:
    def __init__(self, store: RuleStore) -> None:
        self.store = store

    def assemble(self, target_path: str | Path) -> ContextBundle:
        snapshot = self.store.snapshot
        matched = sorted(self.store.matching_candidates(target_path, snapshot=snapshot))
        if not matched:
            logger.debug("No rules match %s", target_path)
            return ContextBundle(target_path=str(target_path))

        resolver = ReferenceResolver(snapshot)
        emitted: set[str] = set()
        segments: list[ContextSegment] = []
        for rule_id in matched:
            resolved = resolver.resolve(rule_id)
            _emit(resolved.node, rule_id, emitted, segments)

        logger.debug(
            "Assembled %d segments from %d matched rules for %s",
            len(segments),
            len(matched),
            target_path,
        )
        return ContextBundle(
            target_path=str(target_path),
            matched=tuple(matched),
            segments=tuple(segments),
            diagnostics=tuple(resolver.diagnostics),
        )


def assemble(target_path: str | Path, store: RuleStore) -> ContextBundle:
    return ContextAssembler(store).assemble(target_path)
