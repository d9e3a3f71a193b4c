from rich.markup import escape
from rich.table import Column, Table

from rule_context.config import Settings
from rule_context.errors import ResolutionError
from rule_context.rules.models import ContextBundle, LoadReport, Rule
from rule_context.tui.enums import DIAGNOSTIC_STYLE, UIStyle
from rule_context.utils import compact_home_path


class RulesTable:
    @staticmethod
    def rules_table(rules: list[Rule]) -> Table:
        table = Table(
            Column(header="Rule", width=28, overflow="fold"),
            Column(header="Globs", overflow="fold", max_width=36),
            Column(header="References", overflow="fold", max_width=30),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for rule in rules:
            if rule.metadata.always_apply:
                globs = f"[{UIStyle.CYAN.value}]always[/{UIStyle.CYAN.value}]"
            elif rule.metadata.patterns:
                globs = escape(", ".join(rule.metadata.patterns))
            else:
                globs = f"[{UIStyle.DIM.value}]never[/{UIStyle.DIM.value}]"
            table.add_row(
                escape(rule.id),
                globs,
                escape(", ".join(rule.references)),
                escape(rule.metadata.description),
            )
        return table


class ReportTable:
    @staticmethod
    def summary_block(report: LoadReport):
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Root", compact_home_path(report.root))
        for key, value in report.summary().items():
            table.add_row(key.capitalize(), str(value))
        return table


class BundleTable:
    @staticmethod
    def summary_block(bundle: ContextBundle):
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Target", escape(bundle.target_path))
        table.add_row("Matched", escape(", ".join(bundle.matched)) or "none")
        table.add_row("Included", escape(", ".join(bundle.rule_ids)) or "none")
        table.add_row("Diagnostics", str(len(bundle.diagnostics)))
        return table

    @staticmethod
    def segments_table(bundle: ContextBundle) -> Table:
        table = Table(
            Column(header="#", width=4, justify="right"),
            Column(header="Rule", overflow="fold"),
            Column(header="Via", overflow="fold"),
            Column(header="Chars", width=8, justify="right"),
            expand=True,
            header_style="bold",
        )
        for index, segment in enumerate(bundle.segments, start=1):
            via = "" if segment.origin_id == segment.rule_id else segment.origin_id
            table.add_row(
                str(index), escape(segment.rule_id), escape(via), str(len(segment.text))
            )
        return table


def diagnostic_lines(diagnostics: list[ResolutionError]) -> str:
    lines: list[str] = []
    for item in diagnostics:
        style = DIAGNOSTIC_STYLE.get(type(item), UIStyle.WHITE.value)
        lines.append(f"- [{style}]{escape(str(item))}[/{style}]")
    return "\n".join(lines)


class SettingsTable:
    @staticmethod
    def settings_block(settings: Settings):
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        for key, value in settings.as_dict().items():
            if isinstance(value, list):
                value = ", ".join(value)
            table.add_row(key, escape("" if value is None else str(value)))
        return table
