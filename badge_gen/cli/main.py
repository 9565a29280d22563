"""
CLI interface for the badge generator.

Provides command-line access to batch generation, the art style test,
style listing and the budget overview.
"""

import sys
from typing import Optional

import typer
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from badge_gen import __version__
from badge_gen.config.budget import format_budget_check
from badge_gen.config.loader import (
    DEFAULT_CONFIG_PATH,
    GenerationParams,
    load_full_config,
    resolve_generation_params,
)
from badge_gen.config.styles import STYLE_PRESETS
from badge_gen.core.art_test import generate_art_test
from badge_gen.core.batch import BatchSummary, BudgetExceededError, generate_batch
from badge_gen.providers import get_provider
from badge_gen.utils.logger import configure_logging

app = typer.Typer(help="Generate caricature-style employee badge photos using AI")
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Console log level (defaults to LOG_LEVEL or INFO)"
    ),
    version: bool = typer.Option(False, "--version", help="Show the version and exit")
):
    """Badge photo generator CLI."""
    if version:
        console.print(f"badge-gen {__version__}")
        raise typer.Exit(EXIT_CODE_PASS)

    load_dotenv(".env.local")
    load_dotenv()
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        console.print("Badge Generator - Use --help to see available commands")


@app.command()
def generate(
    count: Optional[int] = typer.Option(None, "--count", "-c", help="Number of images to generate"),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Art style preset"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output directory"),
    image_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: png or jpg"
    ),
    min_size: Optional[str] = typer.Option(None, "--min-size", help="Minimum dimensions (WxH)"),
    max_size: Optional[str] = typer.Option(None, "--max-size", help="Maximum dimensions (WxH)"),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
    budget: Optional[float] = typer.Option(
        None, "--budget", "-b", help="Set budget limit in USD"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without generating"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Stability AI API key"),
):
    """Generate a batch of badge photos."""
    try:
        params = resolve_generation_params(config, {
            "count": count,
            "style": style,
            "output": output,
            "format": image_format,
            "min_size": min_size,
            "max_size": max_size,
            "budget": budget,
            "dry_run": dry_run,
            "api_key": api_key,
        })
        summary = generate_batch(params)
    except BudgetExceededError as e:
        console.print(f"\n{e.report}\n")
        console.print(f"[red]{e.check.message}[/]")
        sys.exit(EXIT_CODE_FAIL)
    except (OSError, yaml.YAMLError, ValueError) as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    _display_summary(params, summary)
    sys.exit(EXIT_CODE_PASS)


@app.command("art-test")
def art_test(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output directory"),
    image_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: png or jpg"
    ),
    min_size: Optional[str] = typer.Option(None, "--min-size", help="Minimum dimensions (WxH)"),
    max_size: Optional[str] = typer.Option(None, "--max-size", help="Maximum dimensions (WxH)"),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Stability AI API key"),
):
    """Generate one sample image for each art style."""
    try:
        params = resolve_generation_params(config, {
            "output": output,
            "format": image_format,
            "min_size": min_size,
            "max_size": max_size,
            "api_key": api_key,
        })
        try:
            retry_config = load_full_config(config).retry
        except (OSError, yaml.YAMLError):
            console.print("[yellow]Config file not found, using default retry settings[/]")
            retry_config = None
        provider = get_provider(params.provider, params.api_key)
        try:
            results = generate_art_test(params, provider, retry_config)
        finally:
            provider.close()
    except (OSError, yaml.YAMLError, ValueError) as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(f"\n[bold]Art Test Summary[/bold]: {len(results)}/{len(STYLE_PRESETS)} styles")
    for result in results:
        console.print(f"  - {result.path}")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def styles():
    """List available art styles."""
    table = Table(title="Art Styles")
    table.add_column("Name")
    table.add_column("Description")
    for preset in STYLE_PRESETS.values():
        table.add_row(preset.name, preset.description)
    console.print(table)


@app.command("budget")
def budget_status(
    config: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
):
    """Show the budget recorded in the config file."""
    try:
        full_config = load_full_config(config)
    except (OSError, yaml.YAMLError, ValueError) as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    if full_config.budget is None:
        console.print(f"[red]Error:[/] No budget section in {config}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(format_budget_check(full_config.budget.total, full_config.budget.spent, 0.0))


def _display_summary(params: GenerationParams, summary: BatchSummary) -> None:
    """Display the batch outcome."""
    console.print("\n[bold]Badge Generation Result[/bold]")
    console.print("-" * 40)

    if summary.dry_run:
        console.print(f"[dim]Dry run:[/] {summary.requested} images in {params.style} style")
        console.print(f"Estimated cost: ${summary.estimated_cost:.4f}")
        return

    males = sum(1 for r in summary.results if r.gender == "male")
    console.print(f"Requested:  {summary.requested}")
    console.print(f"Generated:  {summary.generated} ({males} male, {summary.generated - males} female)")
    console.print(f"Failed:     {summary.failed}")
    console.print(f"Cost:       ${summary.cost_usd:.4f}")
    console.print(f"Output:     {summary.output_dir}")
    if summary.aborted_by_budget:
        console.print("[yellow]Stopped early: budget limit reached[/]")
    if summary.manifest_path is not None:
        console.print(f"Manifest:   {summary.manifest_path}")


if __name__ == "__main__":
    app()
