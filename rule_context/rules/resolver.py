"""Expand `@file` references between rule documents."""

from __future__ import annotations

import logging
import posixpath
from enum import Enum
from typing import Optional, Union

from rule_context.errors import (
    DanglingReferenceError,
    ReferenceCycleError,
    ResolutionError,
    RuleNotFoundError,
)
from rule_context.rules.models import ResolvedBody, ResolvedNode, Rule, RuleSnapshot
from rule_context.rules.parser import REFERENCE_RE, reference_at
from rule_context.rules.store import RuleStore

logger = logging.getLogger(__name__)


class _Color(str, Enum):
    GREY = "grey"
    BLACK = "black"


class ReferenceResolver:
    """One resolution pass over a fixed snapshot.

    Results are memoized for the lifetime of the instance, so create one per
    `assemble` call and never share it between calls.
    """

    def __init__(self, source: Union[RuleStore, RuleSnapshot]) -> None:
        self._snapshot = source.snapshot if isinstance(source, RuleStore) else source
        self._colors: dict[str, _Color] = {}
        self._memo: dict[str, ResolvedNode] = {}
        self._stack: list[str] = []
        self._reported: set[ResolutionError] = set()
        self._diagnostics: list[ResolutionError] = []

    @property
    def snapshot(self) -> RuleSnapshot:
        return self._snapshot

    @property
    def diagnostics(self) -> list[ResolutionError]:
        return list(self._diagnostics)

    def resolve(self, rule_id: str) -> ResolvedBody:
        rule = self._snapshot.get(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        start = len(self._diagnostics)
        node = self._visit(rule)
        return ResolvedBody(
            rule_id=rule_id,
            node=node,
            diagnostics=tuple(self._diagnostics[start:]),
        )

    def _report(self, error: ResolutionError) -> None:
        if error in self._reported:
            return
        self._reported.add(error)
        self._diagnostics.append(error)
        logger.warning("%s", error)

    def _target_id(self, source: Rule, reference: str) -> Optional[str]:
        if reference in self._snapshot.rules:
            return reference
        base = posixpath.dirname(source.id)
        if base:
            sibling = posixpath.normpath(posixpath.join(base, reference))
            if sibling in self._snapshot.rules:
                return sibling
        return None

    def _visit(self, rule: Rule) -> ResolvedNode:
        if self._colors.get(rule.id) == _Color.BLACK:
            return self._memo[rule.id]

        self._colors[rule.id] = _Color.GREY
        self._stack.append(rule.id)
        node = ResolvedNode(rule_id=rule.id)
        cursor = 0
        for match in REFERENCE_RE.finditer(rule.body):
            before = rule.body[cursor : match.start()]
            if before:
                node.parts.append(before)
            reference, cursor = reference_at(match)
            if not reference:
                continue
            target_id = self._target_id(rule, reference)
            if target_id is None:
                self._report(DanglingReferenceError(rule.id, reference))
                continue
            if self._colors.get(target_id) == _Color.GREY:
                self._report(
                    ReferenceCycleError(rule.id, target_id, chain=tuple(self._stack))
                )
                continue
            child = self._visit(self._snapshot.rules[target_id])
            node.parts.append(child)

        rest = rule.body[cursor:]
        if rest:
            node.parts.append(rest)

        self._stack.pop()
        self._colors[rule.id] = _Color.BLACK
        self._memo[rule.id] = node
        return node


def resolve(rule_id: str, store: Union[RuleStore, RuleSnapshot]) -> ResolvedBody:
    return ReferenceResolver(store).resolve(rule_id)
