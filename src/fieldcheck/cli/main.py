"""fieldcheck CLI entry point."""

import asyncio
import logging
from pathlib import Path

import click

from fieldcheck.config import Settings
from fieldcheck.engine import resolve
from fieldcheck.environment import RuleEnvironment
from fieldcheck.loader import LoaderError, load_messages, load_values
from fieldcheck.validator import Validator


def _build_environment(lenient: bool, dates: bool, messages_path: Path | None) -> RuleEnvironment:
    settings = Settings.from_env()
    if lenient:
        settings.strict = False
    if dates:
        settings.dates = True

    env = RuleEnvironment.from_settings(settings)
    if messages_path is not None:
        env.update_dictionary(load_messages(messages_path))
    return env


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log diagnostics.")
def cli(verbose: bool):
    """fieldcheck: declarative field validation CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--fields",
    "fields_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file mapping field names to rule expressions.",
)
@click.option(
    "--values",
    "values_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file mapping field names to the values to check.",
)
@click.option(
    "--messages",
    "messages_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML message dictionary merged over the built-in messages.",
)
@click.option("--locale", default=None, help="Locale used to render messages.")
@click.option(
    "--lenient",
    is_flag=True,
    default=False,
    help="Values for fields without rules pass instead of failing.",
)
@click.option("--dates", is_flag=True, default=False, help="Enable the date rules.")
def validate(
    fields_path: Path,
    values_path: Path,
    messages_path: Path | None,
    locale: str | None,
    lenient: bool,
    dates: bool,
):
    """Validate a YAML file of values against YAML field rules."""
    try:
        env = _build_environment(lenient, dates, messages_path)
        validator = Validator.from_yaml(fields_path, env=env)
        values = load_values(values_path)
    except LoaderError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(2)

    if locale:
        validator.set_locale(locale)

    valid = asyncio.run(resolve(validator.validate_all(values)))

    if validator.strict_mode:
        for field in values:
            if field not in validator.fields:
                click.echo(click.style(f"{field}: no rules attached", fg="yellow"))

    errors = validator.get_errors()
    for field, messages in errors.collect().items():
        click.echo(click.style(field, bold=True))
        for message in messages:
            click.echo(click.style(f"  ✗ {message}", fg="red"))

    if not valid:
        click.echo(
            click.style(
                f"\n{errors.count()} error(s) in {len(errors.collect())} field(s)",
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    click.echo(click.style(f"All {len(values)} value(s) are valid.", fg="green", bold=True))


@cli.command("rules")
@click.option("--dates", is_flag=True, default=False, help="Include the date rules.")
def rules_cmd(dates: bool):
    """List the registered rule names."""
    env = _build_environment(lenient=False, dates=dates, messages_path=None)
    for name in env.rules.list_registered():
        click.echo(name)
