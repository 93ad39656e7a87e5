"""Check a data file against a form definition."""

import importlib
import json
from pathlib import Path

import click

from formforge.definitions import load_definition, load_values
from formforge.errors import FormforgeError


def import_rule_modules(modules: tuple[str, ...]) -> None:
    """Import modules that register custom rules as a side effect."""
    for module in modules:
        try:
            importlib.import_module(module)
        except ImportError as e:
            raise click.BadParameter(f"cannot import '{module}': {e}", param_hint="--rules-module")


@click.command()
@click.argument(
    "definition",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--data",
    "data_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML/JSON file of field values to check (default: the definition's values).",
)
@click.option(
    "--rules-module",
    "rules_modules",
    multiple=True,
    help="Module to import before checking, for custom rule registration. Repeatable.",
)
@click.option(
    "--show-model",
    is_flag=True,
    default=False,
    help="Print the nested model built from the field values.",
)
def check(definition: Path, data_path: Path | None, rules_modules: tuple[str, ...], show_model: bool):
    """Validate field values against a form DEFINITION."""
    import_rule_modules(rules_modules)

    try:
        form_def = load_definition(definition)
        form = form_def.build()
        if data_path is not None:
            values = load_values(data_path)
            known = {f.name for f in form.fields}
            for name in sorted(set(values) - known):
                click.echo(click.style(f"Warning: '{name}' is not a field of this form", fg="yellow"), err=True)
            form.reset(values)
    except FormforgeError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(2)

    click.echo(f"Form '{form_def.name}' ({len(form.fields)} fields)")
    invalid = 0
    for field in form.fields:
        if field.is_valid:
            click.echo(click.style(f"  ✓ {field.name}", fg="green"))
            continue
        invalid += 1
        label = "required" if field.is_required else "invalid"
        messages = field.get_error_messages()
        detail = f": {'; '.join(messages)}" if messages else ""
        click.echo(click.style(f"  ✗ {field.name} ({label}){detail}", fg="red"))

    if show_model:
        click.echo(json.dumps(form.get_model(), indent=2, default=str))

    if form.is_valid:
        click.echo(click.style("Form is valid.", fg="green", bold=True))
        return

    click.echo(click.style(f"Form is invalid: {invalid} of {len(form.fields)} field(s) failed.", fg="red", bold=True))
    raise SystemExit(1)
