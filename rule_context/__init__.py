"""Load `.mdc` rule documents and assemble per-file context bundles."""

from pathlib import Path
from typing import Optional

from rule_context.assembler import ContextAssembler, assemble
from rule_context.config import ConfigRepository, Settings
from rule_context.rules.models import ContextBundle, LoadReport
from rule_context.rules.store import RuleStore

__version__ = "0.1.0"


def load_rules(
    root_dir: str | Path, settings: Optional[Settings] = None
) -> tuple[RuleStore, LoadReport]:
    return RuleStore.load(Path(root_dir), settings=settings)


def get_context_for(handle: RuleStore, file_path: str | Path) -> ContextBundle:
    return ContextAssembler(handle).assemble(file_path)


def reload(
    handle: RuleStore, root_dir: Optional[str | Path] = None
) -> tuple[RuleStore, LoadReport]:
    report = handle.reload(Path(root_dir) if root_dir is not None else None)
    return handle, report


__all__ = [
    "ConfigRepository",
    "ContextAssembler",
    "ContextBundle",
    "LoadReport",
    "RuleStore",
    "Settings",
    "assemble",
    "get_context_for",
    "load_rules",
    "reload",
]
