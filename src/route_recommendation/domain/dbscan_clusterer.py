# ============================================================
# 📦 src/route_recommendation/domain/dbscan_clusterer.py
# ============================================================

from collections import deque
from dataclasses import dataclass
from typing import List, Sequence

from loguru import logger

from route_recommendation.domain.entities import CustomerLocation, GeoPoint
from route_recommendation.domain.spatial_grid import SpatialGrid


NOISE = -1


@dataclass
class DBSCANResult:
    """labels[i] é o id do cluster do ponto i (0..n_clusters-1) ou NOISE."""
    labels: List[int]
    n_clusters: int

    @property
    def noise_indices(self) -> List[int]:
        return [i for i, lbl in enumerate(self.labels) if lbl == NOISE]

    def members(self, cluster_id: int) -> List[int]:
        return [i for i, lbl in enumerate(self.labels) if lbl == cluster_id]


class DBSCANClusterer:
    """
    DBSCAN acelerado por grade (SpatialGrid).

    - Vizinhança inclui o próprio ponto: é core quem tem >= min_points pontos
      a até epsilon_km.
    - Pontos são visitados na ordem de entrada; ids de cluster seguem a ordem
      de descoberta.
    - Clusters com menos de min_points membros ao final voltam a ser ruído.
    """

    def __init__(self, epsilon_km: float, min_points: int):
        if epsilon_km <= 0:
            raise ValueError(f"epsilon_km deve ser > 0 (recebido {epsilon_km})")
        if min_points < 1:
            raise ValueError(f"min_points deve ser >= 1 (recebido {min_points})")
        self.epsilon_km = epsilon_km
        self.min_points = min_points

    # ============================================================
    # 🔎 Rótulos por ponto
    # ============================================================
    def fit(self, points: Sequence[GeoPoint]) -> DBSCANResult:
        n = len(points)
        if n == 0:
            return DBSCANResult(labels=[], n_clusters=0)

        grid = SpatialGrid(points, self.epsilon_km)
        visited = [False] * n
        labels = [NOISE] * n
        current = 0

        for i in range(n):
            if visited[i]:
                continue
            visited[i] = True

            neighbors = grid.neighbors_within(i)
            if len(neighbors) < self.min_points:
                # ruído provisório: pode virar borda de outro cluster
                continue

            self._expand(grid, i, neighbors, current, visited, labels)
            current += 1

        labels, n_clusters = self._drop_small_clusters(labels, current)
        logger.debug(
            f"🧩 DBSCAN | eps={self.epsilon_km} km | min_pts={self.min_points} "
            f"| clusters={n_clusters} | ruído={labels.count(NOISE)}/{n}"
        )
        return DBSCANResult(labels=labels, n_clusters=n_clusters)

    def _expand(self, grid, seed, neighbors, cluster_id, visited, labels):
        labels[seed] = cluster_id
        queue = deque(neighbors)
        queued = set(neighbors)

        while queue:
            idx = queue.popleft()

            if not visited[idx]:
                visited[idx] = True
                idx_neighbors = grid.neighbors_within(idx)
                if len(idx_neighbors) >= self.min_points:
                    for nb in idx_neighbors:
                        if nb not in queued and labels[nb] == NOISE:
                            queue.append(nb)
                            queued.add(nb)

            if labels[idx] == NOISE:
                labels[idx] = cluster_id

    def _drop_small_clusters(self, labels, n_found):
        sizes = [0] * n_found
        for lbl in labels:
            if lbl != NOISE:
                sizes[lbl] += 1

        remap = {}
        for cid, size in enumerate(sizes):
            if size >= self.min_points:
                remap[cid] = len(remap)

        dropped = n_found - len(remap)
        if dropped:
            logger.debug(f"🧹 {dropped} cluster(s) abaixo de min_pts revertidos para ruído")

        return [remap.get(lbl, NOISE) for lbl in labels], len(remap)

    # ============================================================
    # 👥 Agrupamento de clientes
    # ============================================================
    def cluster(self, customers: Sequence[CustomerLocation]):
        """
        Retorna (clusters, ruído): clusters é uma lista de listas de clientes,
        na ordem de descoberta; ruído preserva a ordem de entrada.
        """
        result = self.fit([c.location for c in customers])
        groups: List[List[CustomerLocation]] = [[] for _ in range(result.n_clusters)]
        noise: List[CustomerLocation] = []
        for customer, lbl in zip(customers, result.labels):
            if lbl == NOISE:
                noise.append(customer)
            else:
                groups[lbl].append(customer)
        return groups, noise
