"""
CLI interface for LLM Cost Compare.

Renders cost comparisons, single-model breakdowns and breakeven estimates.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from llm_cost_compare.config.loader import EngineConfig, load_catalog, load_engine_config
from llm_cost_compare.core.errors import NotFoundError, ValidationError
from llm_cost_compare.core.formatting import format_currency
from llm_cost_compare.core.formulas import (
    NEVER,
    calculate_cost_per_1k,
    calculate_monthly_cost,
    estimate_breakeven,
    summarize_comparison,
)
from llm_cost_compare.core.pricing import CostResult, PricingEngine
from llm_cost_compare.core.token_counter import estimate_tokens
from llm_cost_compare.core.usage import parse_usage_profile

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

INVALID_INPUT_MESSAGE = "Unable to calculate - check inputs"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """LLM Cost Compare CLI."""
    configure_logging(log_level)
    if ctx.invoked_subcommand is None:
        console.print("LLM Cost Compare - Use --help to see available commands")


def configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_engine(catalog: Optional[Path], config: Optional[Path]) -> PricingEngine:
    engine_config = load_engine_config(str(config)) if config else EngineConfig()
    price_catalog = load_catalog(str(catalog)) if catalog else None
    return PricingEngine(catalog=price_catalog, limits=engine_config.limits)


@app.command()
def compare(
    input_tokens: Optional[int] = typer.Option(
        None, "--input-tokens", "-i", help="Input tokens per request"
    ),
    output_tokens: Optional[int] = typer.Option(
        None, "--output-tokens", "-o", help="Output tokens per request"
    ),
    requests_per_day: Optional[int] = typer.Option(
        None, "--requests-per-day", "-r", help="Requests per day"
    ),
    days: int = typer.Option(30, "--days", "-d", help="Time horizon in days"),
    use_case: Optional[str] = typer.Option(
        None, "--use-case", "-u", help="Use-case template providing default usage values"
    ),
    providers: Optional[List[str]] = typer.Option(
        None, "--provider", "-p", help="Provider to include (repeatable; default all)"
    ),
    no_providers: bool = typer.Option(
        False, "--none", help="Compare with an explicitly empty provider selection"
    ),
    catalog: Optional[Path] = typer.Option(
        None, "--catalog", "-c", help="YAML price catalog to use instead of the built-in one"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML file with usage limits and breakeven settings"
    ),
):
    """
    Compare costs across providers for a usage profile.

    Models are ranked cheapest first, followed by a summary of the best
    value, the price range, potential savings and the annualized cost.
    """
    try:
        engine = _build_engine(catalog, config)

        defaults = {"input": 500, "output": 500, "requests": 1000}
        if use_case:
            template = engine.get_use_case_template(use_case)
            if template is None:
                console.print(f"[red]Error:[/] Unknown use case: {escape(use_case)}")
                sys.exit(EXIT_CODE_FAIL)
            defaults = {
                "input": template.avg_input_tokens,
                "output": template.avg_output_tokens,
                "requests": template.requests_per_day,
            }

        profile = parse_usage_profile(
            input_tokens if input_tokens is not None else defaults["input"],
            output_tokens if output_tokens is not None else defaults["output"],
            requests_per_day if requests_per_day is not None else defaults["requests"],
            days,
            limits=engine.limits,
        )

        selection = [] if no_providers else (providers or None)
        results = engine.compare_providers(profile, selection)
    except ValidationError as e:
        console.print(f"\n[bold red]{INVALID_INPUT_MESSAGE}[/]")
        console.print(f"[dim]{escape(str(e))}[/]")
        sys.exit(EXIT_CODE_FAIL)
    except (FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    _display_results(results)
    _display_summary(results, profile.period_days)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def cost(
    provider: str = typer.Argument(..., help="Provider identifier"),
    model: str = typer.Argument(..., help="Model identifier"),
    input_tokens: int = typer.Option(500, "--input-tokens", "-i"),
    output_tokens: int = typer.Option(500, "--output-tokens", "-o"),
    requests_per_day: int = typer.Option(1000, "--requests-per-day", "-r"),
    days: int = typer.Option(30, "--days", "-d"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c"),
):
    """Show the cost breakdown for a single model."""
    try:
        engine = _build_engine(catalog, None)
        result = engine.calculate_model_cost(
            provider,
            model,
            {
                "input_tokens_per_request": input_tokens,
                "output_tokens_per_request": output_tokens,
                "requests_per_day": requests_per_day,
                "period_days": days,
            },
        )
    except ValidationError as e:
        console.print(f"\n[bold red]{INVALID_INPUT_MESSAGE}[/]")
        console.print(f"[dim]{escape(str(e))}[/]")
        sys.exit(EXIT_CODE_FAIL)
    except (NotFoundError, FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(f"\n[bold]{escape(result.provider_display_name)} - {escape(result.model_display_name)}[/bold]")
    console.print("-" * 40)
    console.print(f"Input cost: {format_currency(result.input_cost)}")
    console.print(f"Output cost: {format_currency(result.output_cost)}")
    console.print(f"Total cost: {format_currency(result.total_cost)}")
    console.print(f"Cost/request: {format_currency(result.cost_per_request, 4)}")
    console.print(f"Cost per 1K requests: {format_currency(calculate_cost_per_1k(result.cost_per_request))}")
    console.print(f"Context window: {result.context_window_tokens:,}")
    if result.is_local:
        console.print(f"[yellow]Local hosting:[/] {escape(result.hardware_cost_note)}")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def breakeven(
    api_monthly_cost: float = typer.Option(..., "--api-monthly-cost", help="Monthly API spend"),
    hardware_cost: float = typer.Option(..., "--hardware-cost", help="One-time hardware cost"),
    operating_cost: Optional[float] = typer.Option(
        None, "--operating-cost", help="Monthly electricity and maintenance (default 200)"
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
):
    """Estimate when local hardware pays for itself versus an API."""
    try:
        settings = load_engine_config(str(config)).breakeven if config else EngineConfig().breakeven
        result = estimate_breakeven(
            api_monthly_cost,
            hardware_cost,
            operating_cost if operating_cost is not None else settings.monthly_operating_cost,
            max_months=settings.max_months,
            payback_threshold_months=settings.payback_threshold_months,
        )
    except ValidationError as e:
        console.print(f"\n[bold red]{INVALID_INPUT_MESSAGE}[/]")
        console.print(f"[dim]{escape(str(e))}[/]")
        sys.exit(EXIT_CODE_FAIL)
    except (FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    console.print("\n[bold]Local Hosting Breakeven[/bold]")
    console.print("-" * 40)
    console.print(f"Monthly savings: {format_currency(result.monthly_savings)}")
    if result.breakeven_months == NEVER:
        console.print("Breakeven: never")
    else:
        console.print(f"Breakeven: {result.breakeven_months} months")
    verdict = "[green]Worth it[/]" if result.worth_it else "[yellow]Not worth it[/]"
    console.print(f"Verdict: {verdict}")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def tokens(
    text: Optional[str] = typer.Argument(None, help="Sample text to estimate"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read sample text from a file"),
):
    """Estimate the token count of sample text."""
    if file is not None:
        if not file.exists():
            console.print(f"[red]Error:[/] File not found: {file}")
            sys.exit(EXIT_CODE_FAIL)
        text = file.read_text(encoding="utf-8")
    console.print(f"Estimated tokens: {estimate_tokens(text):,}")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def providers(
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c"),
):
    """List cataloged providers and model prices."""
    try:
        engine = _build_engine(catalog, None)
    except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    table = Table(title="Provider Prices (per 1M tokens)")
    table.add_column("Provider")
    table.add_column("Model", no_wrap=True)
    table.add_column("Input", justify="right")
    table.add_column("Output", justify="right")
    table.add_column("Context", justify="right")
    for provider_id, model_id, model in engine.catalog.iter_models():
        table.add_row(
            escape(provider_id),
            escape(model_id),
            format_currency(model.input_price_per_million),
            format_currency(model.output_price_per_million),
            f"{model.context_window_tokens:,}",
        )
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


@app.command(name="use-cases")
def use_cases(
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c"),
):
    """List use-case templates."""
    try:
        engine = _build_engine(catalog, None)
    except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    table = Table(title="Use Cases")
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Input tokens", justify="right")
    table.add_column("Output tokens", justify="right")
    table.add_column("Requests/day", justify="right")
    for use_case_id, template in engine.catalog.use_cases.items():
        table.add_row(
            escape(use_case_id),
            escape(template.display_name),
            f"{template.avg_input_tokens:,}",
            f"{template.avg_output_tokens:,}",
            f"{template.requests_per_day:,}",
        )
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


def _display_results(results: List[CostResult]) -> None:
    """Display the ranked cost table."""
    console.print("\n[bold]LLM Cost Comparison[/bold]")
    console.print("-" * 40)

    if not results:
        console.print("\n[dim]No providers selected[/]")
        return

    table = Table()
    table.add_column("Provider / Model")
    table.add_column("Input", justify="right")
    table.add_column("Output", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Per request", justify="right")
    table.add_column("Per 1K requests", justify="right")
    table.add_column("Context", justify="right")

    for index, result in enumerate(results):
        label = escape(f"{result.provider_display_name}\n{result.model_display_name}")
        if result.is_local:
            label += "\n[yellow]Local hosting[/]"
        table.add_row(
            label,
            format_currency(result.input_cost),
            format_currency(result.output_cost),
            f"[bold]{format_currency(result.total_cost)}[/bold]",
            format_currency(result.cost_per_request, 4),
            format_currency(calculate_cost_per_1k(result.cost_per_request)),
            f"{result.context_window_tokens:,}",
            style="green" if index == 0 else None,
        )
    console.print(table)


def _display_summary(results: List[CostResult], period_days: int) -> None:
    """Display summary statistics for a comparison."""
    summary = summarize_comparison(results, period_days)
    if summary is None:
        console.print("Select at least one provider to see results")
        return

    cheapest = summary.cheapest
    console.print("\n[bold]Summary[/bold]")
    console.print(
        f"Best value: {format_currency(cheapest.total_cost)} "
        f"({escape(cheapest.provider_display_name)} - {escape(cheapest.model_display_name)})"
    )
    console.print(
        f"Price range: {format_currency(cheapest.total_cost)} - "
        f"{format_currency(summary.most_expensive.total_cost)} "
        f"across {summary.model_count} models"
    )
    console.print(
        f"Potential savings: {format_currency(summary.savings.absolute_savings)} "
        f"({summary.savings.percent_savings}% by choosing {summary.savings.cheaper_model_name})"
    )
    console.print(
        f"Annual cost (lowest): {format_currency(summary.annual_cost)} "
        f"based on {period_days}-day usage"
    )

    if cheapest.is_local:
        console.print(
            f"\n[yellow]Note on local hosting:[/] {escape(cheapest.model_display_name)} requires "
            f"{escape(cheapest.hardware_cost_note)}. Factor in hardware, electricity and "
            f"maintenance when comparing to cloud APIs."
        )
        cheapest_cloud = next((r for r in results if not r.is_local), None)
        if cheapest_cloud is not None:
            monthly = calculate_monthly_cost(cheapest_cloud.total_cost, period_days)
            console.print(
                f"Cheapest cloud option: {escape(cheapest_cloud.model_display_name)} at "
                f"{format_currency(monthly)}/month"
            )

    console.print("\n[bold]Usage statistics:[/bold]")
    console.print(f"Total requests: {cheapest.total_requests:,}")
    console.print(f"Total input tokens: {cheapest.total_input_tokens:,}")
    console.print(f"Total output tokens: {cheapest.total_output_tokens:,}")


if __name__ == "__main__":
    app()
