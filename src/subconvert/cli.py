"""subconvert CLI entry point.

Converts every subtitle file of one format found in a directory and writes
the results into an output directory, with Rich progress output and
human-readable error panels.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from subconvert.errors import SubConvertError
from subconvert.files import convert_file, discover_inputs, resolve_target
from subconvert.options import ConversionOptions

app = typer.Typer(
    name="subconvert",
    help="Convert ASS/SSA subtitles to SRT or WebVTT, and SRT <-> WebVTT.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

_VALID_SOURCE_FORMATS = {"ass", "ssa", "srt", "vtt"}
_VALID_TARGET_FORMATS = {"srt", "vtt"}


def _input_error(message: str) -> None:
    err_console.print(Panel(message, title="[red]Input Error[/red]", border_style="red"))
    raise typer.Exit(1)


@app.command()
def main(
    input_dir: Annotated[
        Path,
        typer.Argument(
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Directory containing the subtitles to convert.",
        ),
    ],
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--output", "-o",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Where converted files are written (default: INPUT_DIR/output).",
        ),
    ] = None,
    source_format: Annotated[
        str,
        typer.Option("--from", "-f", help="Source format: ass, ssa, srt or vtt."),
    ] = "ass",
    target_format: Annotated[
        str,
        typer.Option("--to", "-t", help="Target format for ASS input: srt or vtt. SRT and VTT always swap."),
    ] = "srt",
    min_duration: Annotated[
        int,
        typer.Option("--min-duration", min=0, help="Drop cues lasting this many milliseconds or less."),
    ] = 300,
    keep_codes: Annotated[
        bool,
        typer.Option("--keep-codes", help="Keep ASS override codes in the output text."),
    ] = False,
    no_tags: Annotated[
        bool,
        typer.Option("--no-tags", help="Do not turn \\b, \\i, \\u codes into <b>, <i>, <u> tags."),
    ] = False,
    no_contrast_outline: Annotated[
        bool,
        typer.Option("--no-contrast-outline", help="VTT only: do not force a contrasting text outline."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Log parsing and reconciliation details."),
    ] = False,
) -> None:
    """Convert all subtitle files of one format in INPUT_DIR."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )

    # --- Input validation ---
    source_format = source_format.lower().lstrip(".")
    target_format = target_format.lower().lstrip(".")
    if source_format not in _VALID_SOURCE_FORMATS:
        _input_error(
            f"Unsupported source format: [bold]{source_format}[/bold]\n"
            f"Supported formats: {', '.join(sorted(_VALID_SOURCE_FORMATS))}"
        )
    if target_format not in _VALID_TARGET_FORMATS:
        _input_error(
            f"Unsupported target format: [bold]{target_format}[/bold]\n"
            f"Supported formats: {', '.join(sorted(_VALID_TARGET_FORMATS))}"
        )
    if not input_dir.is_dir():
        _input_error(
            f"Directory not found: [bold]{input_dir}[/bold]\n"
            f"Check that the path is correct and the directory is accessible."
        )

    target = resolve_target(source_format, target_format)
    if output_dir is None:
        output_dir = input_dir / "output"
    options = ConversionOptions(
        strip_control_codes=not keep_codes,
        convert_codes_to_tags=not no_tags,
        min_duration_ms=min_duration,
        force_contrast_outline=not no_contrast_outline,
    )

    sources = discover_inputs(input_dir, source_format)
    if not sources:
        console.print(f"[yellow]No .{source_format} files found in[/] [dim]{input_dir}[/dim]")
        return

    console.print(
        f"\n[bold cyan]subconvert[/bold cyan]  {source_format} -> {target.value}  "
        f"[dim]{len(sources)} file(s)[/dim]\n"
    )

    written: list[Path] = []
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Converting...", total=len(sources))
            for source in sources:
                progress.update(task, description=f"Converting {source.name}")
                written.append(convert_file(source, output_dir, source_format, target, options))
                progress.advance(task)
    except SubConvertError as e:
        # Every typed conversion error becomes a Rich panel, never a traceback.
        err_console.print(Panel(
            f"{source.name}\n\n{e}",
            title="[red]Conversion Error[/red]",
            border_style="red",
        ))
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold green]Conversion complete[/bold green]\n\n"
        f"  Files:   {len(written)}\n"
        f"  Output:  [dim]{output_dir}[/dim]",
        title="[green]Done[/green]",
        border_style="green",
    ))
