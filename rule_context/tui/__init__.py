from rule_context.tui.renderers import RuleConsoleUI

__all__ = ["RuleConsoleUI"]
