import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from bubblevcf.caller import BubbleVariantCaller
from bubblevcf.config import Config, ConfigurationError
from bubblevcf.core.io import GFAReader, MalformedInputError, load_bubbles, write_bubbles
from bubblevcf.reporting.vcf import VCFHeader, VCFWriter
from bubblevcf.variation.bubbles import detect_bubbles

app = typer.Typer(
    name="bubblevcf",
    help="Bubble-based variant calling over GFA sequence graphs.",
    add_completion=False,
    no_args_is_help=True
)


def setup_logging(verbose: bool, level: str = "INFO"):
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _fail(message: str):
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _read_gfa(gfa: Path) -> GFAReader:
    reader = GFAReader()
    try:
        reader.parse(str(gfa))
    except (FileNotFoundError, MalformedInputError) as e:
        _fail(str(e))
    return reader


@app.command()
def call(
    gfa: Annotated[Path, typer.Argument(help="Input GFA file with paths")],
    bubbles: Annotated[Optional[Path], typer.Option("--bubbles", "-b", help="Bubble file (start<TAB>end per line); detected from the graph if omitted")] = None,
    reference: Annotated[Optional[List[str]], typer.Option("--reference", "-r", help="Reference path name (repeatable); all paths by default")] = None,
    max_edges: Annotated[Optional[int], typer.Option(help="Edge traversal budget per bubble")] = None,
    no_inv: Annotated[bool, typer.Option("--no-inv", help="Don't compare two paths if their start and end orientations don't match")] = False,
    no_path_compare: Annotated[bool, typer.Option("--no-path-compare", help="Only use graph-enumerated candidates, not the other input paths")] = False,
    workers: Annotated[Optional[int], typer.Option(help="Number of parallel workers")] = None,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output VCF file (stdout if omitted)")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="YAML configuration file")] = None,
    verbose: bool = False
):
    """Call variants in graph bubbles and write a VCF."""
    config = Config()
    try:
        if config_file is not None:
            config.load_file(str(config_file))
        config.update({
            "reference_paths": reference or None,
            "max_edges": max_edges,
            "ignore_inverted_paths": True if no_inv else None,
            "compare_paths": False if no_path_compare else None,
            "workers": workers,
        })
    except ConfigurationError as e:
        _fail(f"Configuration Error: {e}")
    setup_logging(verbose, config.get("log_level"))

    reader = _read_gfa(gfa)
    paths = reader.get_paths()
    if not paths:
        _fail(f"{gfa} contains no paths to call against")

    if bubbles is not None:
        try:
            bubble_list = load_bubbles(str(bubbles))
        except (FileNotFoundError, MalformedInputError) as e:
            _fail(str(e))
    else:
        bubble_list = detect_bubbles(reader.graph)

    try:
        caller = BubbleVariantCaller.from_config(reader.graph, paths, config,
                                                 show_progress=output is not None)
    except KeyError as e:
        _fail(f"Configuration Error: {e.args[0]}")

    records = caller.call(bubble_list)
    writer = VCFWriter(VCFHeader(str(gfa), caller.contig_lengths()))
    if output is not None:
        writer.write_file(records, str(output))
        typer.echo(f"Wrote {len(records)} records to {output}", err=True)
    else:
        writer.write(records, sys.stdout)


@app.command("bubbles")
def find_bubbles(
    gfa: Annotated[Path, typer.Argument(help="Input GFA file")],
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output bubble file (stdout if omitted)")] = None,
    verbose: bool = False
):
    """Detect bubbles and write them as start<TAB>end lines."""
    setup_logging(verbose)
    reader = _read_gfa(gfa)
    found = detect_bubbles(reader.graph)
    if output is not None:
        with open(output, 'w') as f:
            write_bubbles(found, f)
    else:
        write_bubbles(found, sys.stdout)


@app.command("edge-count")
def edge_count(
    gfa: Annotated[Path, typer.Argument(help="Input GFA file")],
    verbose: bool = False
):
    """Print the inbound and outbound edge counts of every node as CSV."""
    setup_logging(verbose)
    reader = _read_gfa(gfa)
    typer.echo("nodeid,inbound,outbound,total")
    for node, inbound, outbound, total in reader.graph.edge_counts():
        typer.echo(f"{node},{inbound},{outbound},{total}")


def main():
    app()


if __name__ == "__main__":
    main()
