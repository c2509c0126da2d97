"""Command-line interface for the fitdeck layout and content-fitting engine."""

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from openai import AsyncOpenAI, OpenAI
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .color_engine import ColorEngine
from .config import load_deck, load_design_config
from .exceptions import DesignConfigError
from .layout_selector import LayoutSelector
from .slide_designer import SlideDesigner
from .summarizer import Summarizer

# Load environment variables
load_dotenv()

console = Console()


def _configure_logging(debug: bool, log_file: Optional[Path]):
    """Configure root logging handlers and level."""
    import logging

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w"))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def _fail(ctx: click.Context, message: str):
    console.print(f"[red]Error: {escape(message)}[/red]")
    if ctx.obj.get("debug", False):
        import traceback
        console.print(traceback.format_exc())
    else:
        console.print("Run again with --debug or --log-file for details")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug logging and show stack traces on error")
@click.option("--log-file", type=click.Path(path_type=Path), help="Write logs to file")
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_file: Optional[Path]):
    """
    fitdeck - adaptive slide layout and content-fitting engine.

    Turns slide content into layout, typography, color and overflow decisions.
    """
    _configure_logging(debug, log_file)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["log_file"] = log_file


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
@click.option("--palette", "-p", default=None, help="Palette id or domain (overrides the config)")
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(path_type=Path),
    help="Design configuration file (.yaml)"
)
@click.option("--json", "as_json", is_flag=True, help="Print the decisions as JSON")
@click.option(
    "--summarize/--no-summarize",
    default=False,
    help="Summarize overflowing prose with OpenAI instead of truncating it"
)
@click.option("--model", default=None, help="OpenAI model to use for summaries")
@click.option("--async", "async_mode", is_flag=True, help="Design slides concurrently with asyncio")
@click.pass_context
def design(
    ctx: click.Context,
    input_path: Path,
    palette: Optional[str],
    config_path: Optional[Path],
    as_json: bool,
    summarize: bool,
    model: Optional[str],
    async_mode: bool
):
    """Design every slide of a YAML/JSON deck file."""
    try:
        config = load_design_config(config_path)
        slides = load_deck(input_path)
    except DesignConfigError as e:
        _fail(ctx, str(e))

    summarizer = None
    if summarize:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            console.print("[red]Error: OPENAI_API_KEY environment variable not set[/red]")
            console.print("Hint: set OPENAI_API_KEY in your environment or .env file, or use --no-summarize")
            sys.exit(1)
        try:
            client = AsyncOpenAI(api_key=api_key) if async_mode else OpenAI(api_key=api_key)
        except Exception as e:
            console.print(f"[red]Error initializing OpenAI client: {e}[/red]")
            console.print("Hint: verify your API key and network connection")
            sys.exit(1)
        summarizer = Summarizer(
            client,
            model=model or config.summarizer_model,
            temperature=config.summarizer_temperature
        )

    designer = SlideDesigner(palette=palette, summarizer=summarizer, config=config)
    if async_mode:
        designs = asyncio.run(designer.design_deck_async(slides))
    else:
        designs = designer.design_deck(slides)

    if as_json:
        click.echo(json.dumps([d.model_dump(mode="json") for d in designs], indent=2, ensure_ascii=False))
        return

    table = Table(title=f"Slide Design ({designer.palette.name})")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Archetype")
    table.add_column("Layout", style="cyan")
    table.add_column("h1/body")
    table.add_column("Overflow")
    table.add_column("Score", justify="right")

    for d in designs:
        if not d.ok:
            table.add_row(str(d.index), escape(d.content.title), "-", "-", "-", "-", f"[red]{escape(d.error)}[/red]")
            continue
        score_color = "green" if d.validation.score >= 80 else "yellow" if d.validation.score >= 60 else "red"
        overflow = d.overflow.mode
        if d.overflow.slide_count > 1:
            overflow = f"{overflow} ({d.overflow.slide_count} slides)"
        table.add_row(
            str(d.index),
            escape(d.content.title),
            d.analysis.slide_archetype.value,
            d.layout.key,
            f"{d.typography.h1}/{d.typography.body}px",
            overflow,
            f"[{score_color}]{d.validation.score}[/{score_color}]"
        )

    console.print(table)

    for d in designs:
        if d.ok and d.validation.findings:
            console.print(f"\n[bold]Slide {d.index}[/bold]")
            for finding in d.validation.findings:
                color = "red" if finding.severity == "error" else "yellow"
                console.print(f"  [{color}]{finding.severity.upper()}[/{color}] ({finding.source}) {escape(finding.message)}")
                if finding.suggestion:
                    console.print(f"    -> {escape(finding.suggestion)}")

    failed = sum(1 for d in designs if not d.ok)
    if failed:
        console.print(f"\n[yellow]{failed} of {len(designs)} slides could not be designed[/yellow]")


@cli.command()
def palettes():
    """List the palette catalog with WCAG validation scores."""
    engine = ColorEngine()

    table = Table(title="Palettes")
    table.add_column("Id", style="cyan")
    table.add_column("Domain")
    table.add_column("Primary")
    table.add_column("Secondary")
    table.add_column("Accent")
    table.add_column("Score", justify="right")
    table.add_column("Issues")

    for palette in engine.all_palettes():
        result = engine.validate_palette(palette)
        issues = "; ".join(result.errors + result.warnings) or "-"
        table.add_row(
            palette.id,
            palette.domain,
            palette.primary,
            palette.secondary,
            palette.accent,
            str(result.score),
            issues
        )

    console.print(table)


@cli.command()
@click.argument("foreground")
@click.argument("background")
@click.option(
    "--size",
    "text_size",
    default="normal",
    type=click.Choice(["normal", "large", "ui"]),
    help="Text size category"
)
@click.option("--level", default="AAA", type=click.Choice(["AAA", "AA"]), help="WCAG level to check against")
@click.option("--fix", "fix_ratio", type=float, default=None, help="Adjust the foreground to reach this ratio")
def contrast(foreground: str, background: str, text_size: str, level: str, fix_ratio: Optional[float]):
    """Check the contrast of FOREGROUND on BACKGROUND."""
    engine = ColorEngine()
    check = engine.check_contrast(foreground, background, text_size, level)

    status = "[green]PASS[/green]" if check.passes else "[red]FAIL[/red]"
    console.print(f"{escape(foreground)} on {escape(background)}: {check.ratio}:1 ({check.level.value}) {status}")
    console.print(f"Required: {check.required_ratio:g}:1 ({level}, {text_size} text)")
    if check.recommendation:
        console.print(f"[yellow]{escape(check.recommendation)}[/yellow]")

    if fix_ratio is not None:
        adjustment = engine.ensure_contrast_detailed(foreground, background, fix_ratio)
        if adjustment.converged:
            console.print(
                f"[green]Adjusted: {escape(adjustment.color)} ({adjustment.ratio}:1 after "
                f"{adjustment.iterations} steps)[/green]"
            )
        else:
            console.print(
                f"[yellow]Could not reach {fix_ratio:g}:1; best {escape(adjustment.color)} "
                f"({adjustment.ratio}:1 after {adjustment.iterations} steps)[/yellow]"
            )


@cli.command()
def layouts():
    """List the layout catalog."""
    selector = LayoutSelector()

    table = Table(title="Layouts")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Areas")
    table.add_column("Whitespace", justify="right")
    table.add_column("Text width", justify="right")
    table.add_column("Columns", justify="right")

    for layout in selector.available_layouts():
        table.add_row(
            layout.key,
            layout.name,
            ", ".join(layout.areas),
            f"{layout.whitespace_percent:g}%",
            f"{layout.constraints.min_text_width}-{layout.constraints.max_text_width}px",
            str(layout.columns)
        )

    console.print(table)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
