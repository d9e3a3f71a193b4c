"""Tests for glob matching of rule patterns."""

import pytest

from rule_context.rules.globs import match_single, matches, matches_any, split_patterns


def test_basename_pattern_matches_anywhere() -> None:
    assert matches("*.py", "src/app.py") is True
    assert matches("*.py", "app.py") is True
    assert matches("*.py", "deep/nested/dir/app.py") is True


def test_basename_pattern_rejects_other_extension() -> None:
    assert matches("*.py", "src/app.ts") is False


def test_comma_list_is_or_combined() -> None:
    assert matches("*.e2e.js,*.spec.ts", "x.spec.ts") is True
    assert matches("*.e2e.js,*.spec.ts", "login.e2e.js") is True
    assert matches("*.e2e.js,*.spec.ts", "x.ts") is False


def test_question_mark_and_character_class() -> None:
    assert matches("?.py", "a.py") is True
    assert matches("?.py", "ab.py") is False
    assert matches("[ab].py", "b.py") is True
    assert matches("[!ab].py", "b.py") is False
    assert matches("[!ab].py", "c.py") is True


def test_separator_pattern_is_anchored_to_relative_path() -> None:
    assert matches("src/*.py", "src/app.py") is True
    assert matches("src/*.py", "lib/src/app.py") is False
    assert matches("src/*.py", "src/pkg/app.py") is False


def test_double_star_spans_directories() -> None:
    assert matches("src/**/*.py", "src/app.py") is True
    assert matches("src/**/*.py", "src/a/b/app.py") is True
    assert matches("**/*.tsx", "components/Button.tsx") is True
    assert matches("**/*.tsx", "Button.tsx") is True
    assert matches("src/**", "src/a/b") is True
    assert matches("src/**/test_*.py", "src/a/helpers.py") is False


def test_leading_dot_slash_is_ignored() -> None:
    assert matches("./src/*.py", "src/app.py") is True
    assert matches("src/*.py", "./src/app.py") is True


def test_leading_slash_anchors_to_root() -> None:
    assert matches("/*.py", "app.py") is True
    assert matches("/*.py", "deep/app.py") is False
    assert matches("./*.py", "deep/app.py") is False
    assert matches("*.py", "deep/app.py") is True


def test_empty_pattern_never_matches() -> None:
    assert matches("", "app.py") is False
    assert match_single("   ", "app.py") is False
    assert matches(",", "app.py") is False


def test_case_sensitive_by_default() -> None:
    assert matches("*.PY", "app.py") is False
    assert matches("*.PY", "app.py", case_sensitive=False) is True
    assert matches("Src/*.py", "src/app.py", case_sensitive=False) is True


def test_windows_separators_in_path() -> None:
    assert matches("src/*.py", "src\\app.py") is True


@pytest.mark.parametrize(
    "patterns,path,expected",
    [
        (["*.ts", "*.tsx"], "a.tsx", True),
        (["*.ts", "*.tsx"], "a.js", False),
        ([], "a.js", False),
    ],
)
def test_matches_any(patterns: list[str], path: str, expected: bool) -> None:
    assert matches_any(patterns, path) is expected


def test_split_patterns_keeps_empty_items() -> None:
    assert split_patterns("*.py, ,*.pyi") == ("*.py", "", "*.pyi")


def test_split_patterns_accepts_lists_and_quotes() -> None:
    assert split_patterns(['"*.ts,*.tsx"', "*.js"]) == ("*.ts", "*.tsx", "*.js")
    assert matches("'*.py'", "app.py") is True
