#!/usr/bin/env python3
"""
Heuristic bullet selection by role profile.

Scores bullets with a compendium role profile (no LLM), then applies the same
selection constraints and ordering as AI curation.

Usage:
    python scripts/select_for_role.py backend-engineer
    python scripts/select_for_role.py backend-engineer --max-bullets 12 --json
    python scripts/select_for_role.py --list
"""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from curator.contexts.compendium import (
    CompendiumUnavailableError,
    InvalidCompendiumError,
    load_compendium,
)
from curator.contexts.targeting import SelectionConfigError, curate_for_role
from curator.contexts.targeting.logger import setup_targeting_logger
from curator.utils.logger import LOGS_PATH
from curator.utils.timestamp import now

load_dotenv()

app = typer.Typer(help="Select resume bullets using a role profile.", add_completion=False)


@app.command()
def main(
    role_profile: Optional[str] = typer.Argument(None, help="Role profile id"),
    compendium_path: Optional[Path] = typer.Option(
        None, "--compendium", "-c", help="Compendium file (default: COMPENDIUM_PATH)"
    ),
    max_bullets: Optional[int] = typer.Option(None, "--max-bullets", help="Maximum bullets"),
    min_per_company: Optional[int] = typer.Option(
        None, "--min-per-company", help="Minimum bullets per company"
    ),
    list_profiles: bool = typer.Option(False, "--list", "-l", help="List role profiles and exit"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    log_to_file: bool = typer.Option(True, "--log/--no-log", help="Write a detailed log under LOGS_PATH"),
):
    """Select bullets for a role profile and print them in resume order."""
    try:
        compendium = load_compendium(compendium_path)
    except CompendiumUnavailableError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    if list_profiles or role_profile is None:
        typer.echo(f"=== Role Profiles ({len(compendium.role_profiles)}) ===")
        for profile in compendium.role_profiles:
            typer.echo(f"  {profile.id}: {profile.name}")
        raise typer.Exit(0 if list_profiles else 1)

    setup_targeting_logger(
        LOGS_PATH / f"select_{now()}" if log_to_file else None,
        extra_provenance={"Role profile": role_profile},
        console_sink=sys.stderr if as_json else None,
    )

    try:
        result = curate_for_role(
            compendium,
            role_profile,
            config={"maxBullets": max_bullets, "minPerCompany": min_per_company},
        )
    except KeyError as e:
        typer.echo(f"ERROR: {e.args[0]}", err=True)
        raise typer.Exit(1)
    except (SelectionConfigError, InvalidCompendiumError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.echo(f"=== {result.reasoning} ===")
    typer.echo(f"Config: {result.config.to_dict()}")

    current_company = None
    for selected in result.selected:
        if selected.company_id != current_company:
            current_company = selected.company_id
            typer.echo(f"\n{current_company}")
        typer.echo(f"  [{selected.score:.3f}] {selected.bullet.description}")

    for company_id, count in result.unmet_minimums.items():
        typer.echo(f"  ! {company_id} below minimum ({count})")

    typer.secho(f"\n✓ Selected {len(result.selected)} bullets", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
