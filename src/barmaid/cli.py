
"""CLI implementation for barmaid."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from . import parse_source
from .build import build_container, verify_container
from .core.model import BarmaidError, ParseError, ParseResult
from .core.registry import AUTO
from .core.util import hex_span, result_asdict
from .extract import extract_artifacts
from .io import open_source
from .parsers.png import describe_png

APPNAME = "barmaid"

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Manipulate BarTender (.btw) files.")


def _setup_logging(verbose: bool) -> None:
    pkg_logger = logging.getLogger(__package__)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(f"{APPNAME}: %(name)s: %(message)s"))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(path, message: str):
    typer.echo(f"{APPNAME}: {path}: {message}", err=True)
    raise typer.Exit(code=1)


def _choose_mode(heuristic: bool, auto: bool) -> str:
    if heuristic and auto:
        typer.echo(f"{APPNAME}: --heuristic and --auto are mutually exclusive", err=True)
        raise typer.Exit(code=1)
    if heuristic:
        return "heuristic"
    return AUTO if auto else "btw"


def _report(result: ParseResult) -> None:
    """Print resolved ranges as hex offsets on stderr."""
    if result.mode == "heuristic":
        typer.echo(f"{APPNAME}: heuristics active - functionality limited", err=True)
    for i, span in enumerate(result.image_ranges):
        typer.echo(f"{APPNAME}: found PNG #{i}: {hex_span(span)}", err=True)
    if result.payload_range is not None:
        typer.echo(f"{APPNAME}: identified prefix: 0x0 - 0x{result.prefix_end:X}", err=True)
        kind = "compressed" if result.payload_compressed else "uncompressed"
        typer.echo(f"{APPNAME}: found {kind} container: {hex_span(result.payload_range)}", err=True)


@app.command()
def extract(
    file: Path = typer.Argument(..., help="BTW file to split"),
    preview: Optional[Path] = typer.Option(None, "-i", "--preview", help="Write the preview PNG image to FILE"),
    mask: Optional[Path] = typer.Option(None, "-m", "--mask", help="Write the mask PNG image to FILE"),
    prefix: Optional[Path] = typer.Option(None, "-p", "--prefix", help="Write the header region to FILE"),
    container: Optional[Path] = typer.Option(None, "-c", "--container", help="Write the (inflated) payload to FILE"),
    head: Optional[Path] = typer.Option(None, "--head", help="Write everything before the payload to FILE"),
    heuristic: bool = typer.Option(False, "-s", "--heuristic", help="Heuristics scan for png images"),
    auto: bool = typer.Option(False, "--auto", help="Pick the parser by sniffing the file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose"),
):
    """Extract preview images, header and payload from a BTW file."""
    _setup_logging(verbose)
    mode = _choose_mode(heuristic, auto)
    if mode == "heuristic" and (prefix or container or head):
        typer.echo(f"{APPNAME}: -p, -c and --head need structural parsing", err=True)
        raise typer.Exit(code=1)

    try:
        src = open_source(file)
    except OSError:
        _fail(file, "failed to open file")

    with src:
        result = parse_source(src, mode=mode)
        if not result.success:
            if result.mode == "heuristic":
                _fail(file, f"heuristic failed to identify images ({result.error})")
            _fail(file, f"failed to parse file ({result.error})")
        if verbose:
            _report(result)
        try:
            artifacts = extract_artifacts(
                src, result, preview=preview, mask=mask, prefix=prefix, payload=container, head=head,
            )
        except BarmaidError as e:
            _fail(file, str(e))

    if verbose:
        for artifact in artifacts:
            what = "extracted " + artifact.name if artifact.inflated else artifact.name
            typer.echo(f"{APPNAME}: {artifact.target}: wrote {what}", err=True)


@app.command()
def info(
    file: Path = typer.Argument(..., help="BTW file to inspect"),
    heuristic: bool = typer.Option(False, "-s", "--heuristic", help="Heuristics scan for png images"),
    auto: bool = typer.Option(False, "--auto", help="Pick the parser by sniffing the file"),
    fields: Optional[str] = typer.Option(None, "--fields", help="Comma-separated subset of keys to emit"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose"),
):
    """Print the resolved segment layout of a BTW file as JSON."""
    _setup_logging(verbose)
    mode = _choose_mode(heuristic, auto)
    sel_fields = set(fields.split(",")) if fields else None

    try:
        src = open_source(file)
    except OSError:
        _fail(file, "failed to open file")

    with src:
        result = parse_source(src, mode=mode)
        obj = result_asdict(result, fields=sel_fields)
        for key, span in zip(("preview", "mask"), result.image_ranges):
            if key in obj and span is not None:
                try:
                    obj[key].update(describe_png(src, span))
                except ParseError as e:
                    logger.warning("%s: %s", key, e)

    # open output sink
    sink = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        json.dump(obj, sink, indent=2)
        sink.write("\n")
    finally:
        if output:
            sink.close()

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def build(
    file: Path = typer.Argument(..., help="BTW file to write"),
    head: Path = typer.Option(..., "--head", help="Bytes in front of the payload, as written by extract --head"),
    container: Path = typer.Option(..., "-c", "--container", help="Payload to append"),
    compress: bool = typer.Option(True, "--compress/--no-compress", help="zlib-compress the payload"),
    verify: bool = typer.Option(True, "--verify/--no-verify", help="Re-parse the result and compare payloads"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose"),
):
    """Construct a BTW file from a head and a payload."""
    _setup_logging(verbose)
    try:
        size = build_container(head, container, file, compress=compress)
        if verify:
            verify_container(file, container, compressed=compress)
    except BarmaidError as e:
        _fail(file, str(e))
    if verbose:
        typer.echo(f"{APPNAME}: {file}: wrote {size} bytes", err=True)


if __name__ == "__main__":
    app()
