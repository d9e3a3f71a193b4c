"""Tests for context bundle assembly."""

from pathlib import Path

from rule_context.assembler import ContextAssembler, assemble
from rule_context.errors import DanglingReferenceError, ReferenceCycleError
from rule_context.rules.store import RuleStore


def test_black_and_python_scenario(rules_root: Path, write_rule) -> None:
    write_rule("python.mdc", "Use type hints.", globs="*.py")
    write_rule("black.mdc", "Format with Black. @file python.mdc", globs="*.py")
    store, _ = RuleStore.load(rules_root)

    bundle = assemble("module.py", store)
    assert bundle.matched == ("black.mdc", "python.mdc")
    assert bundle.rule_ids == ["black.mdc", "python.mdc"]
    assert bundle.text == "Format with Black. Use type hints."
    assert bundle.text.count("Use type hints.") == 1
    assert bundle.text.index("Format with Black.") < bundle.text.index("Use type hints.")
    assert [segment.origin_id for segment in bundle.segments] == ["black.mdc", "black.mdc"]


def test_shared_reference_appears_once(rules_root: Path, write_rule) -> None:
    write_rule("x.mdc", "X. @file z.mdc", globs="*.py")
    write_rule("y.mdc", "Y. @file z.mdc", globs="*.py")
    write_rule("z.mdc", "Shared Z.", globs="")
    store, _ = RuleStore.load(rules_root)

    bundle = assemble("app.py", store)
    assert bundle.text.count("Shared Z.") == 1
    assert bundle.rule_ids == ["x.mdc", "z.mdc", "y.mdc"]
    z_segment = next(item for item in bundle.segments if item.rule_id == "z.mdc")
    assert z_segment.origin_id == "x.mdc"


def test_lexicographic_order_of_matched_rules(rules_root: Path, write_rule) -> None:
    write_rule("b.mdc", "Second.", globs="*.py")
    write_rule("a.mdc", "First.", globs="*.py")
    write_rule("c/nested.mdc", "Third.", globs="*.py")
    store, _ = RuleStore.load(rules_root)
    assert assemble("app.py", store).text == "First.\n\nSecond.\n\nThird."


def test_no_match_is_empty_bundle(rules_root: Path, write_rule) -> None:
    write_rule("python.mdc", "Use type hints.", globs="*.py")
    store, _ = RuleStore.load(rules_root)

    bundle = assemble("README.md", store)
    assert bundle.is_empty
    assert bundle.matched == ()
    assert bundle.text == ""
    assert bundle.diagnostics == ()


def test_empty_glob_rule_only_reached_by_reference(rules_root: Path, write_rule) -> None:
    write_rule("manual.mdc", "Manual.", globs="")
    write_rule("python.mdc", "Py. @file manual.mdc", globs="*.py")
    store, _ = RuleStore.load(rules_root)
    assert assemble("manual.mdc", store).is_empty
    assert assemble("a.py", store).rule_ids == ["python.mdc", "manual.mdc"]


def test_deterministic_output(rules_root: Path, write_rule) -> None:
    write_rule("a.mdc", "A @file b.mdc @file missing.mdc", globs="*.py")
    write_rule("b.mdc", "B @file a.mdc", globs="*.py")
    write_rule("c.mdc", "C @file b.mdc", globs="*.py")
    store, _ = RuleStore.load(rules_root)

    first = assemble("app.py", store)
    second = assemble("app.py", store)
    assert first == second
    assert first.text == second.text


def test_diagnostics_collected_once(rules_root: Path, write_rule) -> None:
    write_rule("a.mdc", "A @file b.mdc @file missing.mdc", globs="*.py")
    write_rule("b.mdc", "B @file a.mdc", globs="*.py")
    store, _ = RuleStore.load(rules_root)

    bundle = ContextAssembler(store).assemble("app.py")
    assert bundle.text == "A B"
    kinds = sorted(type(item).__name__ for item in bundle.diagnostics)
    assert kinds == sorted(
        [DanglingReferenceError.__name__, ReferenceCycleError.__name__]
    )


def test_assemble_uses_one_snapshot(rules_root: Path, write_rule) -> None:
    write_rule("python.mdc", "Old.", globs="*.py")
    store, _ = RuleStore.load(rules_root)
    before = assemble("a.py", store)

    write_rule("python.mdc", "New.", globs="*.py")
    store.reload()
    after = assemble("a.py", store)

    assert before.text == "Old."
    assert after.text == "New."
