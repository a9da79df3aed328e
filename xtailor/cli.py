import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

import click
import yaml  # type: ignore
from dotenv import load_dotenv

from xtailor import mutators, parser
from xtailor.exceptions import TailoringError
from xtailor.json_utils import (
    document_from_dict,
    document_to_dict,
    json_dumps,
    json_loads,
)
from xtailor.parser import RuleItem, TailoringDocument
from xtailor.parser.types import KINDS, SEVERITY_CHOICES
from xtailor.serializer import EXPORT_FILENAME, serialize
from xtailor.xlsx import write_workbook

try:
    __version__ = version("xtailor")
except PackageNotFoundError:
    __version__ = "0.0.1-dev"

# Passing this as ``--output`` writes XML to the console.
STDOUT = "-"

output_option = click.option(
    "--output",
    "output_path",
    type=click.Path(file_okay=True, dir_okay=True, allow_dash=True),
    default=None,
    help=(
        f"Write XML to FILE or DIRECTORY (default: ./{EXPORT_FILENAME}); "
        "use '-' for the console."
    ),
)


@click.group()
@click.option("--debug/--no-debug", default=False)
@click.option("--trace/--no-trace", default=False)
@click.option(
    "--log-file",
    type=click.Path(file_okay=True, dir_okay=False),
    envvar="XTAILOR_LOG_FILE",
)
@click.version_option(__version__, prog_name="xtailor")
def cli(debug: bool, trace: bool, log_file: Optional[str] = None) -> None:
    """Inspect and edit XCCDF tailoring files.

    Args:
        debug: Toggle debug logging.
        trace: Toggle trace logging.
        log_file: Optional path to the log file.
    """
    if trace:
        level = 1
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        filename=log_file,
        level=level,
        format="[%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if trace:
        logging.debug("Trace mode is on")
    if debug:
        logging.debug("Debug mode is on")
    load_dotenv()


def _load(path: str) -> TailoringDocument:
    """Read and parse ``path``, turning model errors into usage errors."""

    try:
        return parser.read_document(Path(path))
    except TailoringError as exc:
        raise click.ClickException(str(exc)) from exc


def _write_xml(
    doc: TailoringDocument, output_path: Optional[str], raw: bool = False
) -> None:
    """Serialize ``doc`` and write it to ``output_path``.

    Args:
        doc: Document to export.
        output_path: Target file, directory or ``-`` for the console. When
            omitted, ``tailoring_custom.xml`` in the working directory is used.
        raw: Write values without escaping markup characters.
    """

    content = serialize(doc, escape=not raw)

    if output_path == STDOUT:
        click.echo(content)
        return

    final_path = Path(output_path) if output_path else Path(EXPORT_FILENAME)

    # If the provided path is a directory, use the default file name inside.
    if final_path.is_dir():
        final_path = final_path / EXPORT_FILENAME

    final_path.write_text(content, encoding="utf-8")
    click.echo(f"Wrote {len(doc.items)} items to {final_path}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "output_path",
    type=click.Path(file_okay=True, dir_okay=True),
    default=None,
    help="Write output to FILE or DIRECTORY instead of the console.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml", "xlsx"]),
    default="json",
    help="Output format.",
)
def show(
    file: str,
    output_path: Optional[str] = None,
    output_format: str = "json",
) -> None:
    """Print the parsed model of a tailoring file.

    Args:
        file: Tailoring XML file to read.
        output_path: Optional file or directory path for the converted data.
            If a directory is provided, the file name is derived from
            ``file``.
        output_format: Format of the converted data.
    """

    doc = _load(file)

    final_path: Optional[Path] = None
    if output_path:
        final_path = Path(output_path)

        # Mapping from format names to file extensions.
        extensions = {"json": ".json", "yaml": ".yaml", "xlsx": ".xlsx"}

        # If the provided path is a directory, build the file path inside it.
        if final_path.is_dir():
            name = Path(file).stem + extensions[output_format]
            final_path = final_path / name

    if output_format == "xlsx":
        if final_path is None:
            raise click.UsageError("Output file is required for xlsx format.")
        write_workbook(doc, final_path)
        return

    data = document_to_dict(doc)
    if output_format == "json":
        content = json_dumps(data)
    else:
        content = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)

    if final_path:
        final_path.write_text(content, encoding="utf-8")
    else:
        click.echo(content)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("query")
def search(file: str, query: str) -> None:
    """List items whose idref or comment contains QUERY."""

    doc = _load(file)

    # Display one line per match, followed by its comment when present.
    count = 0
    for item in mutators.filter_items(doc.items, query):
        count += 1
        if isinstance(item, RuleItem):
            state = f"selected={item.selected} severity={item.severity}"
        else:
            state = f"value={item.value!r}"
        click.echo(f"[{item.kind}] {item.idref} {state}")
        if item.comment:
            click.echo(f"    {item.comment}")

    click.echo(f"{count} matching items")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@output_option
@click.option(
    "--raw",
    is_flag=True,
    help="Do not escape markup characters in values.",
)
def export(file: str, output_path: Optional[str], raw: bool) -> None:
    """Re-export FILE with a fresh version timestamp."""

    _write_xml(_load(file), output_path, raw=raw)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--kind",
    type=click.Choice(list(KINDS)),
    default="rule",
    show_default=True,
)
@click.option("--idref", default="", help="Referenced rule or value id.")
@click.option(
    "--value",
    default=None,
    help="Selection (true/false) for rules, assigned text for variables.",
)
@click.option(
    "--severity",
    type=click.Choice(list(SEVERITY_CHOICES)),
    default="default",
    show_default=True,
)
@click.option("--comment", default="", help="Comment written before it.")
@output_option
def add(
    file: str,
    kind: str,
    idref: str,
    value: Optional[str],
    severity: str,
    comment: str,
    output_path: Optional[str],
) -> None:
    """Add a rule or variable to the front of FILE's profile."""

    doc = _load(file)
    try:
        mutators.add_item(
            doc.items,
            kind,
            idref,
            value=value,
            severity=severity,
            comment=comment,
        )
    except TailoringError as exc:
        raise click.ClickException(str(exc)) from exc

    _write_xml(doc, output_path)


@cli.command("set")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("idref")
@click.argument("field")
@click.argument("value")
@output_option
def set_field(
    file: str,
    idref: str,
    field: str,
    value: str,
    output_path: Optional[str],
) -> None:
    """Set FIELD to VALUE on every item referencing IDREF."""

    doc = _load(file)
    targets = [item.item_id for item in doc.items if item.idref == idref]
    if not targets:
        raise click.ClickException(f"No item references {idref}")

    try:
        for item_id in targets:
            mutators.update_field(doc.items, item_id, field, value)
    except TailoringError as exc:
        raise click.ClickException(str(exc)) from exc

    _write_xml(doc, output_path)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("idref")
@output_option
def remove(file: str, idref: str, output_path: Optional[str]) -> None:
    """Delete every item referencing IDREF."""

    doc = _load(file)
    targets = [item.item_id for item in doc.items if item.idref == idref]
    if not targets:
        raise click.ClickException(f"No item references {idref}")

    for item_id in targets:
        mutators.delete_item(doc.items, item_id)

    _write_xml(doc, output_path)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@output_option
def build(file: str, output_path: Optional[str]) -> None:
    """Build tailoring XML from a JSON or YAML dump made by ``show``."""

    path = Path(file)

    # Decode JSON or YAML depending on file extension.
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            data = json_loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(f"Cannot decode {file}: {exc}") from exc

    if not isinstance(data, dict):
        raise click.ClickException(f"{file} does not hold a document mapping")

    try:
        doc = document_from_dict(data)
    except (KeyError, ValueError, TailoringError) as exc:
        raise click.ClickException(f"Invalid document data: {exc}") from exc

    _write_xml(doc, output_path)


@cli.command()
def sample() -> None:
    """Print the embedded sample tailoring document."""

    click.echo(parser.SAMPLE_XML)
