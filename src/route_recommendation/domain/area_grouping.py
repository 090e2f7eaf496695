# ============================================================
# 📦 src/route_recommendation/domain/area_grouping.py
# ============================================================

from typing import Dict, List, Sequence

from loguru import logger

from route_recommendation.domain.entities import CustomerLocation


MIN_AREA_GROUP_SIZE = 2


def group_by_area(
    customers: Sequence[CustomerLocation],
    min_size: int = MIN_AREA_GROUP_SIZE,
) -> Dict[str, List[CustomerLocation]]:
    """
    Agrupa clientes pelo nome da área (sem área → "Unknown").
    Só entram clientes com coordenadas válidas; grupos com menos de
    min_size membros são descartados. Ordem: primeira aparição da área.
    """
    groups: Dict[str, List[CustomerLocation]] = {}
    for c in customers:
        if not c.location.is_valid:
            continue
        groups.setdefault(c.area_key, []).append(c)

    kept = {area: members for area, members in groups.items() if len(members) >= min_size}
    logger.debug(f"🏘️ Agrupamento por área | áreas={len(groups)} | mantidas={len(kept)}")
    return kept
