"""Typer CLI entrypoint for conxml."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from lxml import etree
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from conxml.canonical import parse_xml
from conxml.config import ConfigError, ConxmlConfig, load_config
from conxml.container import Container
from conxml.errors import ContainerError, SchemaValidationError
from conxml.messages import MessageVariant, XmlDocumentMessage
from conxml.schema_registry import schema_id_from_namespace
from conxml.verifier import verify_container

app = typer.Typer(help="Conxml container CLI")
_CONSOLE = Console()
_LOGGING_CONFIGURED = False

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        file_okay=True,
        dir_okay=False,
        help="Path to conxml config YAML/JSON file.",
    ),
]
VerboseOption = Annotated[
    bool, typer.Option("--verbose", "-v", help="Enable debug logging.")
]


def _configure_logging(level: int) -> None:
    """Configure Rich-backed logging once for CLI commands."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True), show_path=False, rich_tracebacks=True
            )
        ],
    )
    _LOGGING_CONFIGURED = True


def _load_config(config_file: Path | None, *, verbose: bool) -> ConxmlConfig:
    """Load config, falling back to defaults on invalid payloads.

    Args:
        config_file: Optional config file path.
        verbose: Force DEBUG logging.

    Returns:
        Effective config.
    """
    config = ConxmlConfig()
    if config_file is not None:
        try:
            config = load_config(config_file)
        except ConfigError as exc:
            _CONSOLE.print(
                f"[yellow]Config at {config_file} is invalid; "
                "falling back to defaults.[/yellow]",
                soft_wrap=True,
            )
            _CONSOLE.print(f"[yellow]Reason: {escape(str(exc))}[/yellow]", soft_wrap=True)
    _configure_logging(logging.DEBUG if verbose else config.logging_level)
    return config


def _fail(message: str) -> typer.Exit:
    _CONSOLE.print(
        f"[bold red]{escape(message)}[/bold red]", highlight=False, soft_wrap=True
    )
    return typer.Exit(code=1)


@app.command("schemas")
def schemas_command(
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List known container schemas and the message schemas they require."""
    config = _load_config(config_file, verbose=verbose)
    registry = config.build_registry()
    table = Table(title="Container Schemas", show_header=True, header_style="bold cyan")
    table.add_column("Container schema", style="bold")
    table.add_column("Credit transfer")
    table.add_column("Direct debit")
    table.add_column("Default", style="green")
    for schema_id in registry.known_schemas:
        message_schemas = registry.message_schemas(schema_id)
        table.add_row(
            schema_id,
            message_schemas[MessageVariant.CREDIT_TRANSFER],
            message_schemas[MessageVariant.DIRECT_DEBIT],
            "yes" if schema_id == registry.default_schema else "",
        )
    _CONSOLE.print(table)


@app.command("build")
def build_command(  # noqa: PLR0913
    messages: Annotated[
        list[Path],
        typer.Argument(
            exists=True, file_okay=True, dir_okay=False, help="Pre-rendered pain files."
        ),
    ],
    sender_id: Annotated[str, typer.Option(help="Sender identification.")],
    id_type: Annotated[str, typer.Option(help="Identification type, e.g. EBIC.")],
    schema: Annotated[
        str | None, typer.Option(help="Container schema id; default when omitted.")
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(file_okay=True, dir_okay=False, help="Write XML to this file."),
    ] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Wrap pre-rendered pain documents into one container document."""
    config = _load_config(config_file, verbose=verbose)
    container = Container(
        sender_id,
        id_type,
        registry=config.build_registry(),
        validator=config.build_validator(),
    )
    for path in messages:
        try:
            container.add_message(XmlDocumentMessage(path.read_bytes()))
        except ValueError as exc:
            raise _fail(f"{path}: {exc}") from exc

    try:
        xml = container.render(schema)
    except SchemaValidationError as exc:
        for error in exc.errors:
            _CONSOLE.print(f" - {error}", markup=False, highlight=False)
        raise _fail(f"Incompatible with schema {exc.schema_id}") from exc
    except ContainerError as exc:
        raise _fail(str(exc)) from exc

    if output is None:
        typer.echo(xml)
        return
    output.write_text(xml, encoding="utf-8")
    _CONSOLE.print(f"[green]Wrote {output}[/green]")


@app.command("validate")
def validate_command(
    document: Annotated[
        Path,
        typer.Argument(exists=True, file_okay=True, dir_okay=False, help="Container XML."),
    ],
    schema: Annotated[
        str | None,
        typer.Option(help="Container schema id; read from the root namespace if omitted."),
    ] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Validate a container document against its container schema."""
    config = _load_config(config_file, verbose=verbose)
    try:
        root = parse_xml(document.read_bytes())
        schema_id = schema or schema_id_from_namespace(etree.QName(root).namespace)
        errors = config.build_validator().errors_for(root, schema_id)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    if errors:
        for error in errors:
            _CONSOLE.print(f" - {error}", markup=False, highlight=False)
        raise _fail(f"INVALID against {schema_id}")
    _CONSOLE.print(f"[green]VALID against {schema_id}[/green]")


@app.command("verify")
def verify_command(
    document: Annotated[
        Path,
        typer.Argument(exists=True, file_okay=True, dir_okay=False, help="Container XML."),
    ],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Recompute embedded message hashes and compare them to HashValue."""
    _load_config(config_file, verbose=verbose)
    try:
        checks = verify_container(document.read_bytes())
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    table = Table(title="Embedded Messages", show_header=True, header_style="bold cyan")
    table.add_column("#", style="bold")
    table.add_column("Wrapper")
    table.add_column("Status")
    for check in checks:
        status = "[green]ok[/green]" if check.matches else "[red]MISMATCH[/red]"
        table.add_row(str(check.index), check.wrapper, status)
    _CONSOLE.print(table)

    mismatched = [check for check in checks if not check.matches]
    if not checks:
        raise _fail("No embedded messages found")
    if mismatched:
        raise _fail(f"{len(mismatched)} embedded message(s) failed verification")
    _CONSOLE.print(f"[green]{len(checks)} embedded message(s) verified[/green]")
