"""
Presentation ordering for selected bullets.

Companies appear in resume order (newest first, as authored in the compendium);
within a company, bullets are ordered best first by the selection ranking.
"""

from typing import Dict, List, Sequence

from curator.contexts.compendium import Compendium
from curator.contexts.targeting.selection import SelectedBullet, ranking_key


def reorder_by_company_chronology(
    selected: Sequence[SelectedBullet], compendium: Compendium
) -> List[SelectedBullet]:
    """
    Group selected bullets by company in resume order.

    Never adds, drops or alters a bullet, and is idempotent.

    Args:
        selected: Bullets from the selection engine
        compendium: Compendium providing company order

    Returns:
        New list grouped by company, best bullet first within each company
    """
    company_order = compendium.company_index()

    groups: Dict[str, List[SelectedBullet]] = {}
    for bullet in selected:
        groups.setdefault(bullet.company_id, []).append(bullet)

    ordered = []
    for company_id in sorted(groups, key=lambda cid: company_order.get(cid, len(company_order))):
        ordered.extend(sorted(groups[company_id], key=ranking_key))
    return ordered
