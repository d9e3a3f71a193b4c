import json
import posixpath
from pathlib import Path, PurePath
from typing import Any


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=False)
        handle.write("\n")


def is_under(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
        return True
    except (OSError, ValueError):
        return False


def normalize_rule_id(value: str) -> str:
    """Return a POSIX identifier with `./`, `..` and duplicate slashes collapsed."""
    text = value.strip().replace("\\", "/")
    if not text:
        return ""
    normalized = posixpath.normpath(text)
    if normalized == ".":
        return ""
    return normalized


def rule_id_for(path: Path, root: Path) -> str:
    return PurePath(path.relative_to(root)).as_posix()


def relative_target(target: str | Path, root: Path | None) -> str:
    text = str(target).replace("\\", "/")
    candidate = Path(text)
    if root is not None and candidate.is_absolute() and is_under(candidate, root):
        return candidate.resolve().relative_to(root.resolve()).as_posix()
    return normalize_rule_id(text) or text


def compact_home_path(path: str | Path) -> str:
    text = str(path)
    home = str(Path.home())
    if text == home:
        return "~"
    home_prefix = f"{home}/"
    if text.startswith(home_prefix):
        return f"~/{text[len(home_prefix):]}"
    return text


def compact_home_paths_in_text(text: str) -> str:
    home = str(Path.home())
    if text == home:
        return "~"
    return text.replace(f"{home}/", "~/")
