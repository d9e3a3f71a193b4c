from rule_context.rules.globs import matches, matches_any
from rule_context.rules.models import (
    ContextBundle,
    ContextSegment,
    LoadReport,
    MatchContext,
    ResolvedBody,
    Rule,
    RuleMetadata,
    RuleSnapshot,
)
from rule_context.rules.parser import parse_rule, parse_rule_text
from rule_context.rules.repository import RulesRepository
from rule_context.rules.resolver import ReferenceResolver, resolve
from rule_context.rules.store import RuleStore

__all__ = [
    "ContextBundle",
    "ContextSegment",
    "LoadReport",
    "MatchContext",
    "ReferenceResolver",
    "ResolvedBody",
    "Rule",
    "RuleMetadata",
    "RuleSnapshot",
    "RuleStore",
    "RulesRepository",
    "matches",
    "matches_any",
    "parse_rule",
    "parse_rule_text",
    "resolve",
]
