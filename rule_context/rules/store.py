"""In-memory rule index with copy-then-swap reload."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from rule_context.config import Settings
from rule_context.errors import RuleNotFoundError
from rule_context.rules.globs import match_single
from rule_context.rules.models import LoadReport, MatchContext, Rule, RuleSnapshot
from rule_context.rules.repository import RulesRepository
from rule_context.utils import relative_target

logger = logging.getLogger(__name__)


def build_snapshot(root: Path, rules: list[Rule]) -> RuleSnapshot:
    by_id: dict[str, Rule] = {}
    index: dict[str, list[str]] = {}
    always: list[str] = []
    for rule in sorted(rules, key=lambda item: item.id):
        by_id[rule.id] = rule
        if rule.metadata.always_apply:
            always.append(rule.id)
        for pattern in rule.metadata.patterns:
            ids = index.setdefault(pattern, [])
            if rule.id not in ids:
                ids.append(rule.id)
    return RuleSnapshot(
        root=root,
        rules=by_id,
        pattern_index={pattern: tuple(ids) for pattern, ids in index.items()},
        always=tuple(always),
    )


def snapshot_candidates(
    snapshot: RuleSnapshot, path: str, case_sensitive: bool = True
) -> set[str]:
    found: set[str] = set(snapshot.always)
    for pattern, ids in snapshot.pattern_index.items():
        if found.issuperset(ids):
            continue
        if match_single(pattern, path, case_sensitive=case_sensitive):
            found.update(ids)
    return found


class RuleStore:
    """Handle over the current rule snapshot.

    Readers grab `snapshot` once and work on it; `reload` builds a complete
    replacement before publishing it with a single assignment, so a reader
    sees either the old index or the new one. The lock only serializes
    concurrent reloads.
    """

    def __init__(
        self,
        snapshot: RuleSnapshot,
        settings: Optional[Settings] = None,
    ) -> None:
        self._snapshot = snapshot
        self._settings = settings or Settings()
        self._reload_lock = threading.Lock()

    @classmethod
    def load(
        cls, root: Path, settings: Optional[Settings] = None
    ) -> tuple["RuleStore", LoadReport]:
        settings = settings or Settings()
        snapshot, report = cls._build(Path(root), settings)
        return cls(snapshot, settings=settings), report

    @staticmethod
    def _build(root: Path, settings: Settings) -> tuple[RuleSnapshot, LoadReport]:
        repository = RulesRepository(
            root,
            extension=settings.extension,
            ignored_dirs=settings.ignored_dirs,
            max_workers=settings.max_workers,
        )
        rules, report = repository.scan()
        return build_snapshot(repository.rules_dir, rules), report

    @property
    def snapshot(self) -> RuleSnapshot:
        return self._snapshot

    @property
    def root(self) -> Path:
        return self._snapshot.root

    @property
    def settings(self) -> Settings:
        return self._settings

    def reload(self, root: Optional[Path] = None) -> LoadReport:
        """Rebuild from disk and publish atomically.

        On DirectoryScanError the published snapshot is left untouched.
        """
        with self._reload_lock:
            target = Path(root) if root is not None else self._snapshot.root
            snapshot, report = self._build(target, self._settings)
            self._snapshot = snapshot
        logger.info("Reloaded %d rules from %s", len(snapshot), target)
        return report

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._snapshot.get(rule_id)

    def lookup(self, rule_id: str) -> Rule:
        rule = self._snapshot.get(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    def list_rules(self) -> list[Rule]:
        snapshot = self._snapshot
        return [snapshot.rules[rule_id] for rule_id in snapshot.ids]

    def match_context(
        self, path: str | Path, snapshot: Optional[RuleSnapshot] = None
    ) -> MatchContext:
        if snapshot is None:
            snapshot = self._snapshot
        project_root = self._settings.project_root or snapshot.root
        return MatchContext(
            target_path=str(path),
            relative_path=relative_target(path, project_root),
        )

    def matching_candidates(
        self, path: str | Path, snapshot: Optional[RuleSnapshot] = None
    ) -> set[str]:
        if snapshot is None:
            snapshot = self._snapshot
        context = self.match_context(path, snapshot=snapshot)
        return snapshot_candidates(
            snapshot,
            context.relative_path,
            case_sensitive=self._settings.case_sensitive,
        )
