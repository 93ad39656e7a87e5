"""formforge CLI entry point."""

import logging
import os

import click


@click.group()
@click.option(
    "--log-level",
    default=lambda: os.environ.get("FORMFORGE_LOG_LEVEL", "WARNING"),
    show_default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (or FORMFORGE_LOG_LEVEL).",
)
def cli(log_level: str):
    """formforge: declarative form validation CLI."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


# Register subcommands
from formforge.cli.check_cmd import check  # noqa: E402
from formforge.cli.rules_cmd import rules  # noqa: E402

cli.add_command(check)
cli.add_command(rules)
