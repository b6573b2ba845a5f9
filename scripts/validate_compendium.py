#!/usr/bin/env python3
"""
Validate a compendium file before using it for curation.

Usage:
    python scripts/validate_compendium.py
    python scripts/validate_compendium.py data/compendium.yaml
"""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from curator.contexts.compendium import (
    CompendiumUnavailableError,
    load_compendium,
    validate_compendium,
)

load_dotenv()

app = typer.Typer(help="Validate compendium structure.", add_completion=False)


@app.command()
def main(
    compendium_path: Optional[Path] = typer.Argument(
        None, help="Compendium file (default: COMPENDIUM_PATH)"
    ),
):
    """Load a compendium, report its shape and any structural problems."""
    try:
        compendium = load_compendium(compendium_path)
    except CompendiumUnavailableError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("=== Experience ===")
    for company in compendium.experience:
        bullets = sum(len(p.children) for p in company.children)
        typer.echo(
            f"  {company.display_name}: {len(company.children)} positions, {bullets} bullets"
        )
    typer.echo(f"\nTotal bullets: {compendium.total_bullets}")
    typer.echo(f"Role profiles: {len(compendium.role_profiles)}")

    problems = validate_compendium(compendium)
    if problems:
        typer.echo(f"\n=== Problems ({len(problems)}) ===")
        for problem in problems:
            typer.echo(f"  ! {problem}")
        raise typer.Exit(1)

    typer.secho("\n✓ Compendium is valid", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
