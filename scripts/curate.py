#!/usr/bin/env python3
"""
AI-driven bullet curation CLI

Scores every compendium bullet against a job description with an LLM provider
(retrying and falling back across providers), then selects and orders the final
bullets under the configured diversity constraints.

Examples:\n

    curate.py job.md                                  # Default provider and config

    curate.py job.md --provider claude-haiku          # Start from a specific provider

    curate.py job.md --max-bullets 18 --no-fallback   # Override config, single provider

    curate.py job.md --json > selection.json          # Machine-readable output
"""

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from curator.contexts.compendium import CompendiumUnavailableError, load_compendium
from curator.contexts.scoring import FALLBACK_ORDER, SelectionError, SelectionOptions
from curator.contexts.scoring.logger import setup_scoring_logger
from curator.contexts.targeting import curate, resolve_provider
from curator.utils.logger import LOGS_PATH
from curator.utils.timestamp import now

load_dotenv()

app = typer.Typer(
    help="Select resume bullets for a job description using AI scoring",
    add_completion=False,
)


@app.command()
def main(
    job_file: Annotated[
        Path,
        typer.Argument(help="Text/markdown file containing the job description", exists=True),
    ],
    compendium_path: Annotated[
        Optional[Path],
        typer.Option("--compendium", "-c", help="Compendium file (default: COMPENDIUM_PATH)"),
    ] = None,
    provider: Annotated[
        Optional[str],
        typer.Option(
            "--provider",
            "-p",
            help=f"Initial provider (one of: {', '.join(FALLBACK_ORDER)})",
        ),
    ] = None,
    max_bullets: Annotated[Optional[int], typer.Option("--max-bullets", help="Maximum bullets")] = None,
    max_per_company: Annotated[
        Optional[int], typer.Option("--max-per-company", help="Maximum bullets per company")
    ] = None,
    max_per_position: Annotated[
        Optional[int], typer.Option("--max-per-position", help="Maximum bullets per position")
    ] = None,
    min_per_company: Annotated[
        Optional[int], typer.Option("--min-per-company", help="Minimum bullets per company")
    ] = None,
    max_retries: Annotated[int, typer.Option("--max-retries", help="Attempts per provider", min=1)] = 3,
    timeout: Annotated[float, typer.Option("--timeout", help="Seconds per vendor call")] = 30.0,
    no_fallback: Annotated[
        bool, typer.Option("--no-fallback", help="Do not fall back to other providers")
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
    log_to_file: Annotated[
        bool, typer.Option("--log/--no-log", help="Write a detailed log under LOGS_PATH")
    ] = True,
):
    """Curate resume bullets for a job description."""
    try:
        provider_name = resolve_provider(provider)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    log_dir = LOGS_PATH / f"curate_{now()}" if log_to_file else None
    # JSON output owns stdout; progress logs go to stderr
    log_file = setup_scoring_logger(log_dir, provider_name, console_sink=sys.stderr if as_json else None)

    try:
        compendium = load_compendium(compendium_path)
    except CompendiumUnavailableError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    overrides = {
        "maxBullets": max_bullets,
        "maxPerCompany": max_per_company,
        "maxPerPosition": max_per_position,
        "minPerCompany": min_per_company,
    }

    try:
        result = asyncio.run(
            curate(
                job_file.read_text(encoding="utf-8"),
                compendium,
                provider=provider_name,
                config=overrides,
                options=SelectionOptions(
                    max_retries=max_retries,
                    timeout_s=timeout,
                    enable_fallback=not no_fallback,
                ),
            )
        )
    except SelectionError as e:
        typer.secho(f"Error: {e.simplified_message()}", fg=typer.colors.RED, err=True)
        typer.echo(f"Last provider: {e.provider}, vendor calls: {e.retries_attempted}", err=True)
        if log_file:
            typer.echo(f"Details: {log_file}", err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.secho(f"\nSelected {len(result.selected)} bullets", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Provider: {result.provider} (attempt {result.attempt_count}, {result.tokens_used} tokens)")
    if result.job_title:
        typer.echo(f"Job title: {result.job_title}")
    if result.salary:
        salary = result.salary
        typer.echo(f"Salary: {salary.min}-{salary.max} {salary.currency} ({salary.period})")

    current_company = None
    for selected in result.selected:
        if selected.company_id != current_company:
            current_company = selected.company_id
            typer.secho(f"\n{current_company}", bold=True)
        typer.echo(f"  [{selected.score:.2f}] {selected.bullet.description}")

    if result.unmet_minimums:
        typer.secho("\nCompanies below minimum:", fg=typer.colors.YELLOW)
        for company_id, count in result.unmet_minimums.items():
            typer.echo(f"  {company_id}: {count}")

    typer.echo(f"\nReasoning: {result.reasoning}")
    if log_file:
        typer.echo(f"Log: {os.path.relpath(log_file)}")


if __name__ == "__main__":
    app()
