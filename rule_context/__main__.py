import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from rule_context.assembler import ContextAssembler
from rule_context.config import ConfigRepository, Settings
from rule_context.errors import RuleContextError
from rule_context.rules.models import LoadReport
from rule_context.rules.resolver import ReferenceResolver
from rule_context.rules.store import RuleStore
from rule_context.tui import RuleConsoleUI


def _root_option():
    return click.option(
        "--root",
        "root",
        type=click.Path(path_type=Path, file_okay=False),
        default=None,
        help="Rules root directory (defaults to the configured rules_dir).",
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _settings_from_obj(obj: Dict[str, Any]) -> Settings:
    return obj["settings"]


def _load_store(obj: Dict[str, Any], root: Optional[Path]) -> tuple[RuleStore, LoadReport]:
    settings = _settings_from_obj(obj)
    rules_root = root if root is not None else settings.rules_root()
    try:
        return RuleStore.load(rules_root, settings=settings)
    except RuleContextError as exc:
        raise click.ClickException(str(exc))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Settings file (defaults to ~/.config/rule-context/config.json).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """Resolve .mdc rules into per-file context."""
    _configure_logging(verbose)
    repository = ConfigRepository()
    try:
        settings = repository.load_settings(config_path)
    except RuleContextError as exc:
        raise click.ClickException(str(exc))
    ctx.obj = {
        "settings": settings,
        "config_source": str(config_path or repository.config_path),
    }


@cli.group(help="Inspect loaded rule documents.")
def rules() -> None:
    pass


@rules.command("list", help="List loaded rules.")
@_root_option()
@click.pass_obj
def rules_list(obj: Dict[str, Any], root: Optional[Path]) -> None:
    ui = RuleConsoleUI(Console())
    store, _ = _load_store(obj, root)
    ui.render_rules(store.list_rules())


@rules.command("check", help="Load rules and report malformed documents.")
@_root_option()
@click.pass_obj
def rules_check(obj: Dict[str, Any], root: Optional[Path]) -> None:
    ui = RuleConsoleUI(Console())
    _, report = _load_store(obj, root)
    ui.render_report(report)
    if not report.ok:
        raise click.exceptions.Exit(1)


@cli.command(help="List rules whose globs match a file path.")
@click.argument("path")
@_root_option()
@click.pass_obj
def match(obj: Dict[str, Any], path: str, root: Optional[Path]) -> None:
    ui = RuleConsoleUI(Console())
    store, _ = _load_store(obj, root)
    ui.render_matches(path, sorted(store.matching_candidates(path)))


@cli.command(help="Expand @file references of one rule.")
@click.argument("rule_id")
@_root_option()
@click.pass_obj
def resolve(obj: Dict[str, Any], rule_id: str, root: Optional[Path]) -> None:
    ui = RuleConsoleUI(Console())
    store, _ = _load_store(obj, root)
    try:
        resolved = ReferenceResolver(store).resolve(rule_id)
    except RuleContextError as exc:
        raise click.ClickException(str(exc))
    ui.render_resolved(resolved)


@cli.command(help="Assemble the context bundle for a file path.")
@click.argument("path")
@_root_option()
@click.option("--plain", is_flag=True, help="Print only the bundle text.")
@click.option("--json", "as_json", is_flag=True, help="Print the bundle as JSON.")
@click.pass_obj
def context(
    obj: Dict[str, Any], path: str, root: Optional[Path], plain: bool, as_json: bool
) -> None:
    store, _ = _load_store(obj, root)
    bundle = ContextAssembler(store).assemble(path)
    if as_json:
        click.echo(json.dumps(bundle.as_dict(), indent=2))
        return
    if plain:
        if bundle.text:
            click.echo(bundle.text)
        return
    RuleConsoleUI(Console()).render_bundle(bundle)


@cli.group(help="Show or write settings.")
def config() -> None:
    pass


@config.command("show", help="Show effective settings.")
@click.pass_obj
def config_show(obj: Dict[str, Any]) -> None:
    ui = RuleConsoleUI(Console())
    ui.render_settings(_settings_from_obj(obj), obj["config_source"])


@config.command("init", help="Write default settings to the config file.")
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
@click.pass_obj
def config_init(obj: Dict[str, Any], force: bool) -> None:
    ui = RuleConsoleUI(Console())
    repository = ConfigRepository()
    if repository.config_path.exists() and not force:
        raise click.ClickException(f"Config already exists: {repository.config_path}")
    path = repository.save_settings(Settings())
    ui.render_settings(Settings(), str(path))


def main() -> int:
    try:
        # Outside standalone mode click returns the code of ctx.exit() instead of raising.
        code = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return code if isinstance(code, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
