"""Discover and load rule documents from a rules root."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Union

from rule_context.constants import DEFAULT_MAX_WORKERS, IGNORED_DIRS, RULE_EXTENSION
from rule_context.errors import DirectoryScanError, RuleFileError
from rule_context.rules.models import LoadReport, Rule, RuleMetadata
from rule_context.rules.parser import extract_references, parse_rule, serialize_rule
from rule_context.utils import rule_id_for

logger = logging.getLogger(__name__)


class RulesRepository:
    def __init__(
        self,
        root: Path,
        extension: str = RULE_EXTENSION,
        ignored_dirs: Iterable[str] = IGNORED_DIRS,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._rules_dir = Path(root).expanduser()
        self._extension = extension
        self._ignored_dirs = tuple(ignored_dirs)
        self._max_workers = max(1, max_workers)

    @property
    def rules_dir(self) -> Path:
        return self._rules_dir

    def _is_rule_file(self, name: str) -> bool:
        return name.endswith(self._extension) and not name.startswith(".")

    def _keep_dir(self, name: str) -> bool:
        return not name.startswith(".") and name not in self._ignored_dirs

    @staticmethod
    def _dir_key(path: str) -> tuple[int, int]:
        try:
            stat = os.stat(path)
        except OSError as exc:
            raise DirectoryScanError(Path(path), f"Cannot stat directory ({exc.strerror})") from exc
        return stat.st_dev, stat.st_ino

    @staticmethod
    def _check_cycles(
        root_key: tuple[int, int],
        edges: dict[tuple[int, int], list[tuple[tuple[int, int], str]]],
    ) -> None:
        on_path: set[tuple[int, int]] = set()
        done: set[tuple[int, int]] = set()

        def _visit(key: tuple[int, int]) -> None:
            on_path.add(key)
            for child_key, child in edges.get(key, ()):
                if child_key in on_path:
                    target = os.path.realpath(child)
                    raise DirectoryScanError(Path(child), f"Symlink cycle (points to {target})")
                if child_key not in done:
                    _visit(child_key)
            on_path.discard(key)
            done.add(key)

        _visit(root_key)

    def discover(self) -> tuple[list[Path], list[str]]:
        """Return (rule files sorted by id, skipped entries).

        Every directory is walked once, keyed by device and inode; real
        directories claim their inode before links to them in the same
        parent. Raises DirectoryScanError when the root cannot be enumerated
        or the followed links form a cycle.
        """
        root = self._rules_dir
        if not root.exists():
            raise DirectoryScanError(root, "Rules root does not exist")
        if not root.is_dir():
            raise DirectoryScanError(root, "Rules root is not a directory")

        def _on_error(exc: OSError) -> None:
            raise DirectoryScanError(Path(exc.filename or root), f"Cannot list directory ({exc.strerror})")

        files: list[Path] = []
        skipped: list[str] = []
        root_key = self._dir_key(str(root))
        visited: set[tuple[int, int]] = {root_key}
        # Directory graph as followed through links, checked for cycles below.
        edges: dict[tuple[int, int], list[tuple[tuple[int, int], str]]] = {}

        for current, dir_names, file_names in os.walk(
            str(root), topdown=True, onerror=_on_error, followlinks=True
        ):
            children = edges.setdefault(self._dir_key(current), [])
            candidates = sorted(
                (name for name in dir_names if self._keep_dir(name)),
                key=lambda name: (os.path.islink(os.path.join(current, name)), name),
            )
            kept: list[str] = []
            for name in candidates:
                child = os.path.join(current, name)
                child_key = self._dir_key(child)
                children.append((child_key, child))
                if child_key in visited:
                    skipped.append(rule_id_for(Path(child), root))
                    logger.debug("Skipping already visited directory %s", child)
                    continue
                visited.add(child_key)
                kept.append(name)
            dir_names[:] = sorted(kept)

            for name in sorted(file_names):
                path = Path(current) / name
                if self._is_rule_file(name):
                    files.append(path)
                elif not name.startswith("."):
                    skipped.append(rule_id_for(path, root))

        self._check_cycles(root_key, edges)
        files.sort(key=lambda item: rule_id_for(item, root))
        return files, skipped

    def _parse(self, path: Path) -> Union[Rule, RuleFileError]:
        try:
            return parse_rule(path, self._rules_dir)
        except RuleFileError as exc:
            return exc

    def scan(self) -> tuple[list[Rule], LoadReport]:
        files, skipped = self.discover()
        report = LoadReport(root=self._rules_dir, skipped=skipped)

        if len(files) > 1 and self._max_workers > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                results = list(executor.map(self._parse, files))
        else:
            results = [self._parse(path) for path in files]

        rules: list[Rule] = []
        for result in results:
            if isinstance(result, RuleFileError):
                logger.warning("Skipping rule: %s", result)
                report.errors.append(result)
                continue
            if "" in result.metadata.globs:
                report.warnings.append(f"Empty glob pattern in {result.id}")
            if not result.is_matchable:
                logger.debug("Rule %s has no patterns and is never auto-attached", result.id)
            rules.append(result)
            report.loaded.append(result.id)

        logger.info(
            "Scanned %s: %d loaded, %d errors, %d warnings",
            self._rules_dir,
            len(report.loaded),
            len(report.errors),
            len(report.warnings),
        )
        return rules, report

    def save_rule(
        self, rule_id: str, body: str, metadata: RuleMetadata
    ) -> Rule:
        path = self._rules_dir / rule_id
        path.parent.mkdir(parents=True, exist_ok=True)
        rule = Rule(
            id=rule_id,
            source_path=path,
            metadata=metadata,
            body=body,
            references=extract_references(body),
        )
        path.write_text(serialize_rule(rule), encoding="utf-8")
        return rule

