import sys
from pathlib import Path
from typing import Any, Callable, Optional

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def rules_root(tmp_path: Path) -> Path:
    root = tmp_path / "project" / ".cursor" / "rules"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def write_rule(rules_root: Path) -> Callable[..., Path]:
    def _write(
        rule_id: str,
        body: str,
        globs: Optional[str] = "",
        description: Optional[str] = "",
        extra: str = "",
    ) -> Path:
        lines = ["---"]
        if description is not None:
            lines.append(f"description: {description}")
        if globs is not None:
            lines.append(f"globs: {globs}")
        if extra:
            lines.append(extra)
        lines.append("---")
        lines.append(body)
        path = rules_root / rule_id
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
