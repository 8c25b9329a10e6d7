"""CLI entry point for tsrunner."""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Sequence, Tuple

import click

from tsrunner import __version__
from tsrunner.config import RunnerConfig, load_config
from tsrunner.core import TestRunner, TsRunnerError
from tsrunner.loading import register_all
from tsrunner.reporting import TerminalReporter


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
MODULES_ENV = "TSRUNNER_MODULES"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"tsrunner {__version__}")
    raise click.exceptions.Exit()


def _filter_options(func):
    func = click.option(
        "-c", "--case-name", type=str, help="The name of the test case within a test set."
    )(func)
    func = click.option("-s", "--set-name", type=str, help="The name of the test set.")(func)
    return func


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True, **CONTEXT_SETTINGS},
    add_help_option=False,
)
@_filter_options
def _filter_command(set_name: Optional[str], case_name: Optional[str]) -> None:
    """Filter flags understood by a test file run as a script."""


def parse_filter_args(argv: Sequence[str]) -> Tuple[Optional[str], Optional[str]]:
    """Extract ``-s/--set-name`` and ``-c/--case-name`` from ``argv``; other args are ignored."""

    try:
        ctx = _filter_command.make_context("tsrunner", list(argv))
    except click.ClickException as err:
        raise TsRunnerError(err.format_message()) from err
    with ctx:
        return ctx.params.get("set_name"), ctx.params.get("case_name")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the tsrunner version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Top level CLI group for tsrunner."""

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.argument("modules", nargs=-1)
@_filter_options
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML run configuration (defaults to ./tsrunner.yaml when present).",
)
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def run(
    state: CliState,
    modules: Tuple[str, ...],
    set_name: Optional[str],
    case_name: Optional[str],
    config_path: Optional[str],
    no_color: bool,
) -> None:
    """Run the test sets registered by MODULES (dotted names or .py files)."""

    config = _resolve_config(config_path, modules, set_name=set_name, case_name=case_name)
    if config.verbose and not state.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    runner = TestRunner(
        config.set_name,
        config.case_name,
        reporters=[TerminalReporter(use_color=config.color and not no_color)],
    )
    _register(config, runner)
    if not runner.pending():
        click.echo("No test sets were registered.")
        raise click.exceptions.Exit(1)
    raise click.exceptions.Exit(runner.close())


@cli.command(name="list")
@click.argument("modules", nargs=-1)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML run configuration (defaults to ./tsrunner.yaml when present).",
)
def list_sets(modules: Tuple[str, ...], config_path: Optional[str]) -> None:
    """List the test sets and cases registered by MODULES without running them."""

    config = _resolve_config(config_path, modules)
    runner = TestRunner(reporters=[])
    _register(config, runner)
    for test_set in runner.pending():
        click.echo(test_set.name)
        for name in test_set.case_names():
            click.echo(f"  {name}")


def _resolve_config(
    config_path: Optional[str],
    modules: Tuple[str, ...],
    *,
    set_name: Optional[str] = None,
    case_name: Optional[str] = None,
) -> RunnerConfig:
    try:
        config = load_config(config_path)
    except TsRunnerError as exc:
        raise click.ClickException(str(exc)) from exc
    return config.merged(
        set_name=set_name,
        case_name=case_name,
        modules=tuple(modules) + _split_csv(os.environ.get(MODULES_ENV)),
    )


def _register(config: RunnerConfig, runner: TestRunner) -> None:
    if not config.modules:
        raise click.UsageError("No test modules given (pass MODULES, set modules in the config, or TSRUNNER_MODULES).")
    try:
        register_all(config.modules, runner)
    except TsRunnerError as exc:
        raise click.ClickException(str(exc)) from exc


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    return tuple(parts)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="tsrunner", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
