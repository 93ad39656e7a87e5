"""List registered validation rules."""

import click

from formforge.cli.check_cmd import import_rule_modules
from formforge.validation import BUILTIN_RULES, RuleRegistry


@click.command()
@click.option(
    "--rules-module",
    "rules_modules",
    multiple=True,
    help="Module to import first, for custom rule registration. Repeatable.",
)
def rules(rules_modules: tuple[str, ...]):
    """List registered validation rules."""
    import_rule_modules(rules_modules)

    names = RuleRegistry.list_registered()
    for name in names:
        origin = "builtin" if BUILTIN_RULES.get(name) is RuleRegistry.get(name) else "custom"
        click.echo(f"  {name:<24} {origin}")
    click.echo(f"{len(names)} rule(s) registered")
