from rich.console import Console
from rich.markup import escape

from rule_context.config import Settings
from rule_context.errors import ResolutionError
from rule_context.rules.models import ContextBundle, LoadReport, ResolvedBody, Rule
from rule_context.tui.enums import UIStyle
from rule_context.tui.sections import UISection
from rule_context.tui.tables import (
    BundleTable,
    ReportTable,
    RulesTable,
    SettingsTable,
    diagnostic_lines,
)
from rule_context.utils import compact_home_path, compact_home_paths_in_text


class RuleConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def _render_diagnostics(self, diagnostics: list[ResolutionError]) -> None:
        if not diagnostics:
            return
        self.console.print(
            UISection.note(
                "diagnostics",
                diagnostic_lines(diagnostics),
                style=UIStyle.YELLOW.value,
            )
        )

    def render_rules(self, rules: list[Rule]) -> None:
        if not rules:
            self.console.print(
                UISection.note("rules", "No rules loaded.", style=UIStyle.YELLOW.value)
            )
            return
        self.console.print(
            UISection.wrap(
                "rules", RulesTable.rules_table(rules), style=UIStyle.BLUE.value
            )
        )

    def render_report(self, report: LoadReport) -> None:
        self.console.print(
            UISection.wrap(
                "load report",
                ReportTable.summary_block(report),
                style=UIStyle.GREEN.value if report.ok else UIStyle.RED.value,
            )
        )
        if report.errors:
            errors_text = "\n".join(
                [f"- {escape(compact_home_paths_in_text(str(item)))}" for item in report.errors]
            )
            self.console.print(
                UISection.note("errors", errors_text, style=UIStyle.RED.value)
            )
        if report.warnings:
            warnings_text = "\n".join([f"- {escape(item)}" for item in report.warnings])
            self.console.print(
                UISection.note("warnings", warnings_text, style=UIStyle.YELLOW.value)
            )

    def render_matches(self, target: str, rule_ids: list[str]) -> None:
        if not rule_ids:
            self.console.print(
                UISection.note(
                    "matches",
                    f"No rules match {escape(target)}.",
                    style=UIStyle.DIM.value,
                )
            )
            return
        body = "\n".join(f"- {escape(rule_id)}" for rule_id in rule_ids)
        self.console.print(
            UISection.note(f"matches: {escape(target)}", body, style=UIStyle.CYAN.value)
        )

    def render_resolved(self, resolved: ResolvedBody) -> None:
        self.console.print(
            UISection.wrap(
                f"resolved: {escape(resolved.rule_id)}",
                escape(resolved.text.strip()) or "(empty)",
                style=UIStyle.BLUE.value,
                subtitle=escape(", ".join(resolved.node.iter_rule_ids())),
            )
        )
        self._render_diagnostics(list(resolved.diagnostics))

    def render_bundle(self, bundle: ContextBundle) -> None:
        self.console.print(
            UISection.wrap(
                "context overview",
                BundleTable.summary_block(bundle),
                style=UIStyle.BLUE.value,
            )
        )
        if bundle.is_empty:
            self.console.print(
                UISection.note(
                    "context", "No rules apply to this file.", style=UIStyle.DIM.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "segments",
                BundleTable.segments_table(bundle),
                style=UIStyle.CYAN.value,
            )
        )
        self.console.print(
            UISection.wrap("context", escape(bundle.text), style=UIStyle.MAGENTA.value)
        )
        self._render_diagnostics(list(bundle.diagnostics))

    def render_settings(self, settings: Settings, source: str) -> None:
        self.console.print(
            UISection.wrap(
                "settings",
                SettingsTable.settings_block(settings),
                style=UIStyle.BLUE.value,
                subtitle=escape(compact_home_path(source)),
            )
        )
