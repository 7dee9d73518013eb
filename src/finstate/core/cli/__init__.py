"""Finstate CLI — entry point for the project and reconcile commands."""

import click

from finstate import __version__
from finstate.core.exceptions import FinStateError


@click.group()
@click.version_option(version=__version__, package_name="finstate")
@click.option(
    "--config", "config_file", type=click.Path(dir_okay=False), default=None, help="YAML or JSON config file."
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """Finstate — cash-flow projections and ledger-derived holdings."""
    from finstate.core.cli.common import load_config
    from finstate.core.utils.logging import setup_logging

    try:
        config = load_config(config_file)
        settings = config.validated()
    except FinStateError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(level=log_level or settings.logging.level, log_file=settings.logging.file)
    ctx.obj = config


# Register subcommands
from .project_cmd import project
from .reconcile_cmd import reconcile

main.add_command(project)
main.add_command(reconcile)
