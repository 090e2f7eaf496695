# ============================================================
# 📦 src/route_recommendation/domain/spatial_grid.py
# ============================================================

import math
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from loguru import logger

from route_recommendation.domain.entities import GeoPoint
from route_recommendation.domain.geo_math import EARTH_RADIUS_KM, KM_PER_DEGREE, haversine_km


FULL_CIRCLE_DEG = 360.0


def max_longitude_span_deg(epsilon_km: float, max_abs_lat: float) -> float:
    """
    Maior diferença de longitude (graus) entre dois pontos a até epsilon_km,
    ambos com |lat| <= max_abs_lat. Da haversine:
        sin(dlon/2) <= sin(eps / 2R) / cos(lat)
    Retorna inf quando qualquer longitude é possível (perto do polo).
    """
    cos_lat = math.cos(math.radians(min(90.0, max_abs_lat)))
    if cos_lat <= 0:
        return math.inf
    ratio = math.sin(epsilon_km / (2 * EARTH_RADIUS_KM)) / cos_lat
    if ratio >= 1:
        return math.inf
    return 2 * math.degrees(math.asin(ratio))


class SpatialGrid:
    """
    Índice em grade uniforme para busca de vizinhos em raio fixo.

    Linhas de latitude com aresta epsilon_km / 111 graus. A longitude é dividida
    em N colunas iguais de 360/N graus, largas o bastante para a latitude mais
    extrema do conjunto; o índice da coluna dá a volta no antimeridiano
    (coluna N-1 é vizinha da coluna 0). Perto dos polos N = 1 e cada linha
    vira uma única faixa. Assim todo vizinho real cai no bloco 3x3 ao redor
    da célula do ponto.
    """

    def __init__(self, points: Sequence[GeoPoint], epsilon_km: float):
        if epsilon_km <= 0:
            raise ValueError(f"epsilon_km deve ser > 0 (recebido {epsilon_km})")

        self.points = list(points)
        self.epsilon_km = epsilon_km
        self.lat_cell_deg = epsilon_km / KM_PER_DEGREE

        # margem de uma linha para absorver erro de ponto flutuante
        max_abs_lat = max((abs(p.latitude) for p in self.points), default=0.0)
        span = max_longitude_span_deg(epsilon_km, max_abs_lat + self.lat_cell_deg)

        self.n_columns = max(1, int(FULL_CIRCLE_DEG // span)) if math.isfinite(span) else 1
        self.lon_cell_deg = FULL_CIRCLE_DEG / self.n_columns

        self.cells: Dict[Tuple[int, int], List[int]] = defaultdict(list)
        for idx, p in enumerate(self.points):
            self.cells[self.cell_of(p)].append(idx)

        logger.debug(
            f"🧱 SpatialGrid | pontos={len(self.points)} | células={len(self.cells)} "
            f"| célula={self.lat_cell_deg:.5f}° x {self.lon_cell_deg:.5f}° | colunas={self.n_columns}"
        )

    def cell_of(self, point: GeoPoint) -> Tuple[int, int]:
        column = math.floor((point.longitude + 180.0) / self.lon_cell_deg) % self.n_columns
        return column, math.floor(point.latitude / self.lat_cell_deg)

    def _columns_around(self, column: int):
        # com N <= 2 as colunas vizinhas se repetem
        return sorted({(column + d) % self.n_columns for d in (-1, 0, 1)})

    def neighbors_within(self, point_index: int, epsilon_km: float = None) -> List[int]:
        """
        Índices dos pontos a no máximo epsilon_km do ponto dado (ele próprio incluso),
        em ordem crescente de índice.
        """
        eps = self.epsilon_km if epsilon_km is None else epsilon_km
        if eps > self.epsilon_km:
            raise ValueError(
                f"epsilon_km={eps} maior que a aresta da grade ({self.epsilon_km} km)"
            )

        p = self.points[point_index]
        cx, cy = self.cell_of(p)
        neighbors = []
        for col in self._columns_around(cx):
            for dy in (-1, 0, 1):
                for i in self.cells.get((col, cy + dy), ()):
                    q = self.points[i]
                    if haversine_km(p.latitude, p.longitude, q.latitude, q.longitude) <= eps:
                        neighbors.append(i)

        neighbors.sort()
        return neighbors
