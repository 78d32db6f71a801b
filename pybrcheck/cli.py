"""Defines the command-line interface for the brcheck application.

This module uses the `click` library to create the `brcheck` command. It
serves as the main entry point for all user interactions: validating,
formatting and generating documents, checking single records or whole CSV
files, and managing the configuration.
"""
import csv
import io
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import click
from halo import Halo
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.config import Config
from .core.exceptions import BrcheckError
from .core.validator import discover_validators, resolve_document_field, run_service, validate_record
from .validators import CNPJValidator, CPFValidator, EmailValidator, PasswordValidator

console = Console(emoji=True)
err_console = Console(stderr=True)

# Set up basic logging.
logger = logging.getLogger(__name__)

VALIDATOR_KINDS = {
    "cpf": CPFValidator,
    "cnpj": CNPJValidator,
    "email": EmailValidator,
    "password": PasswordValidator,
}
DOCUMENT_KINDS = {"cpf": CPFValidator, "cnpj": CNPJValidator}


class AliasedGroup(click.Group):
    """A custom click Group that supports command aliases and case-insensitivity."""

    def __init__(self, *args, **kwargs):
        """Initializes the aliased group."""
        super().__init__(*args, **kwargs)
        self._aliases: Dict[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Gets a command by name, checking for aliases and prefixes.

        Args:
            ctx: The click context.
            cmd_name: The command name entered by the user.

        Returns:
            The matched click command, or None.
        """
        cmd_name = cmd_name.lower()
        # Exact match
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv
        # Alias match
        if cmd_name in self._aliases:
            return super().get_command(ctx, self._aliases[cmd_name])
        # Prefix match
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        ctx.fail(f"Ambiguous command: '{cmd_name}'. Matches: {', '.join(sorted(matches))}")
        return None

    def add_alias(self, alias: str, command_name: str) -> None:
        """Adds an alias for a command.

        Args:
            alias: The alias to add.
            command_name: The name of the command to alias.
        """
        self._aliases[alias.lower()] = command_name.lower()


def _fail(message: str) -> None:
    """Prints an error to stderr and exits with status 1."""
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="brcheck")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Validate and format Brazilian business record fields.

    brcheck checks CPF and CNPJ taxpayer numbers, email addresses and
    password strength, formats documents with their punctuation masks and
    generates synthetic documents for test data.
    """
    if sys.platform == "win32" and isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding='utf-8')
    log_level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'brcheck validate <kind> <value>' to check a value, or 'brcheck --help' for more commands.")


def _display_results(validator_results: List[Dict[str, Any]], title: str) -> None:
    """Displays validator results as a summary table followed by their issues.

    Args:
        validator_results: Result dictionaries produced by the validators.
        title: The table title.
    """
    summary_table = Table(title=title)
    summary_table.add_column("Validator", style="cyan")
    summary_table.add_column("Status")
    summary_table.add_column("Details")
    for res in validator_results:
        status = "[green]Passed[/green]"
        if res.get("errors"):
            status = "[red]Failed[/red]"
        elif res.get("warnings"):
            status = "[yellow]Warning[/yellow]"
        details = ", ".join(f"{k}={v}" for k, v in res.get("info", {}).items())
        summary_table.add_row(res["name"], status, escape(details))
    console.print(summary_table)

    issues = [(res["name"], "ERROR", msg) for res in validator_results for msg in res.get("errors", [])]
    issues += [(res["name"], "WARNING", msg) for res in validator_results for msg in res.get("warnings", [])]
    if issues:
        issues_table = Table(title="Issues")
        issues_table.add_column("Validator", style="cyan")
        issues_table.add_column("Level", style="bold")
        issues_table.add_column("Message")
        for name, level, message in issues:
            color = "red" if level == "ERROR" else "yellow"
            issues_table.add_row(name, f"[{color}]{level}[/{color}]", escape(message))
        console.print(issues_table)


@main.command(name="validate")
@click.argument("kind", type=click.Choice(sorted(VALIDATOR_KINDS)))
@click.argument("value", type=str)
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def validate(kind: str, value: str, json_output: bool, config_path: Optional[str]) -> None:
    """Validate a single CPF, CNPJ, email address or password.

    Exits with status 1 when the value is invalid.
    """
    validator = VALIDATOR_KINDS[kind](Config(config_path=config_path))
    result = validator.check(value)
    if json_output:
        click.echo(json.dumps(result, indent=2))
    else:
        _display_results([result], title=f"{validator.name} validation")
    if not result["valid"]:
        sys.exit(1)


@main.command()
@click.argument("kind", type=click.Choice(sorted(DOCUMENT_KINDS)))
@click.argument("value", type=str)
def mask(kind: str, value: str) -> None:
    """Format a CPF or CNPJ with its punctuation mask."""
    try:
        click.echo(DOCUMENT_KINDS[kind]().mask(value))
    except BrcheckError as e:
        _fail(str(e))


@main.command()
@click.argument("kind", type=click.Choice(sorted(DOCUMENT_KINDS)))
@click.argument("value", type=str)
def unmask(kind: str, value: str) -> None:
    """Strip a CPF or CNPJ down to its digits."""
    try:
        click.echo(DOCUMENT_KINDS[kind]().unmask(value))
    except BrcheckError as e:
        _fail(str(e))


@main.command(name="format")
@click.argument("kind", type=click.Choice(sorted(DOCUMENT_KINDS)))
@click.argument("value", type=str)
def format_check(kind: str, value: str) -> None:
    """Check whether a CPF or CNPJ is well formatted, fully or partially typed.

    Check digits are not verified. Exits with status 1 when the format is
    not recognized.
    """
    if DOCUMENT_KINDS[kind]().is_valid_format(value):
        console.print(f"[green]'{escape(value)}' is a valid {kind.upper()} format.[/green]")
    else:
        console.print(f"[red]'{escape(value)}' is not a valid {kind.upper()} format.[/red]")
        sys.exit(1)


@main.command()
@click.argument("email", type=str)
def normalize(email: str) -> None:
    """Trim and lowercase an email address."""
    click.echo(EmailValidator().normalize(email))


@main.command()
@click.argument("kind", type=click.Choice(sorted(DOCUMENT_KINDS)))
@click.option("--count", "-n", type=click.IntRange(min=1), default=1, help="Number of documents to generate.")
@click.option("--masked", is_flag=True, help="Print documents with their punctuation mask.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def generate(kind: str, count: int, masked: bool, config_path: Optional[str]) -> None:
    """Generate synthetic, valid CPF or CNPJ numbers for test data."""
    validator = DOCUMENT_KINDS[kind](Config(config_path=config_path))
    try:
        for _ in range(count):
            document = validator.generate()
            click.echo(validator.mask(document) if masked else document)
    except BrcheckError as e:
        _fail(str(e))


def _build_record(email: Optional[str], password: Optional[str], document: Optional[str]) -> Dict[str, str]:
    """Builds a record dict from the provided fields, routing the document by length."""
    record = {}
    if email is not None:
        record["email"] = email
    if password is not None:
        record["password"] = password
    if document is not None:
        record[resolve_document_field(document)] = document
    return record


@main.command()
@click.option("--email", type=str, help="Email address to check.")
@click.option("--password", type=str, help="Password to check.")
@click.option("--document", type=str, help="CPF or CNPJ to check.")
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def check(email: Optional[str], password: Optional[str], document: Optional[str], json_output: bool, config_path: Optional[str]) -> None:
    """Check a record made of an email, a password and a CPF or CNPJ.

    Any subset of the fields may be given. Exits with status 1 when any
    field is invalid.
    """
    record = _build_record(email, password, document)
    if not record:
        _fail("Provide at least one of --email, --password or --document.")

    report = validate_record(record, Config(config_path=config_path))
    if json_output:
        click.echo(json.dumps(report, indent=2))
    else:
        _display_results(report["validator_results"], title="Record validation")
    if not report["valid"]:
        sys.exit(1)


@main.command()
@click.argument("csv_file", type=click.File("r", encoding="utf-8"))
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def batch(csv_file, json_output: bool, config_path: Optional[str]) -> None:
    """Check every row of a CSV file.

    The file needs a header row; the columns `email`, `password` and
    `document` are checked when present. Exits with status 1 when any row is
    invalid.
    """
    config_obj = Config(config_path=config_path)
    rows = list(csv.DictReader(csv_file))
    if not rows:
        console.print("[yellow]No rows found in the file.[/yellow]")
        return

    reports = []
    with Halo(text="Checking rows...", spinner="dots", stream=sys.stderr, enabled=sys.stderr.isatty()) as spinner:
        for i, row in enumerate(rows, start=1):
            spinner.text = f"Checking row {i}/{len(rows)}"
            record = _build_record(row.get("email"), row.get("password"), row.get("document"))
            report = validate_record(record, config_obj)
            report["row"] = i
            reports.append(report)
        spinner.succeed(f"Checked {len(rows)} row(s)")

    invalid = [r for r in reports if not r["valid"]]
    if json_output:
        click.echo(json.dumps(reports, indent=2))
    else:
        table = Table(title=f"Results for {csv_file.name}")
        table.add_column("Row", style="cyan")
        table.add_column("Status")
        table.add_column("Issues")
        for report in reports:
            status = "[green]Valid[/green]" if report["valid"] else "[red]Invalid[/red]"
            table.add_row(str(report["row"]), status, escape("; ".join(report["errors"])))
        console.print(table)
        style = "red" if invalid else "green"
        console.print(Panel(f"{len(reports) - len(invalid)} valid, {len(invalid)} invalid.", style=style, title="Batch Complete"))

    if invalid:
        sys.exit(1)


@main.command()
@click.option("--email", type=str, required=True, help="Contact email address.")
@click.option("--password", type=str, required=True, help="Account password.")
@click.option("--cnpj", type=str, required=True, help="Company CNPJ.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def service(email: str, password: str, cnpj: str, config_path: Optional[str]) -> None:
    """Run the onboarding report for a company contact and print it as JSON.

    Exits with status 1 when the input is rejected.
    """
    result = run_service(email, password, cnpj, Config(config_path=config_path))
    click.echo(json.dumps(result, indent=2))
    if not result["success"]:
        sys.exit(1)


@main.command(name="list")
def list_validators() -> None:
    """List the available validators and whether they are enabled."""
    config_obj = Config()
    table = Table(title="Validators")
    table.add_column("Validator", style="cyan")
    table.add_column("Field", style="magenta")
    table.add_column("Enabled")
    table.add_column("Description")
    for validator_cls in discover_validators():
        enabled = "[green]yes[/green]" if config_obj.is_validator_enabled(validator_cls.name) else "[red]no[/red]"
        table.add_row(validator_cls.name, validator_cls.field, enabled, validator_cls.description)
    console.print(table)


@main.command()
@click.argument("action", type=click.Choice(['get', 'set', 'list', 'reset']), required=True)
@click.argument("key", type=str, required=False)
@click.argument("value", type=str, required=False)
def config(action: str, key: Optional[str], value: Optional[str]) -> None:
    """Manage the brcheck configuration.

    This command allows you to view, set, and reset configuration values
    that are stored in the user-level configuration file.

    \b
    ACTION:
        get <key>       Get a configuration value.
        set <key> <value> Set a configuration value.
        list            List all current configuration values.
        reset           Reset the configuration to its default state.
    """
    config_obj = Config()
    if action == "list":
        console.print(Panel(json.dumps(config_obj.config, indent=2), title="Current Configuration"))
    elif action == "get":
        if not key:
            _fail("'get' action requires a key.")
        click.echo(json.dumps(config_obj.get(key)))
    elif action == "set":
        if not key or value is None:
            _fail("'set' action requires a key and a value.")
        # Type casting for bools and ints
        if value.lower() in ('true', 'false'):
            processed_value: Any = value.lower() == 'true'
        elif value.isdigit():
            processed_value = int(value)
        else:
            processed_value = value
        config_obj.set(key, processed_value)
        try:
            config_obj.save_user_config()
            console.print(f"[green]'{key}' set to '{processed_value}' and saved to user config.[/green]")
        except IOError as e:
            _fail(f"saving configuration: {e}")
    elif action == "reset":
        if Config.reset_user_config():
            console.print("[green]Configuration reset to defaults.[/green]")
        else:
            console.print("[yellow]No user configuration file to reset.[/yellow]")


main.add_alias('v', 'validate')
main.add_alias('g', 'generate')
main.add_alias('ls', 'list')

if __name__ == "__main__":
    main()
