from typing import Final


APP_NAME: Final[str] = "rule-context"
CONFIG_FILENAME: Final[str] = "config.json"

RULES_DIRNAME: Final[str] = ".cursor/rules"
RULE_EXTENSION: Final[str] = ".mdc"

FRONTMATTER_DELIMITER: Final[str] = "---"
REFERENCE_TOKEN: Final[str] = "@file"

DESCRIPTION_KEY: Final[str] = "description"
GLOBS_KEY: Final[str] = "globs"
ALWAYS_APPLY_KEYS: Final[tuple[str, ...]] = ("alwaysApply", "always_apply")

PATTERN_SEPARATOR: Final[str] = ","
RECURSIVE_WILDCARD: Final[str] = "**"

IGNORED_DIRS: Final[tuple[str, ...]] = (
    "node_modules",
    ".venv",
)
DEFAULT_MAX_WORKERS: Final[int] = 4
