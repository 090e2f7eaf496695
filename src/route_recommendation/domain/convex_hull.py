# ============================================================
# 📦 src/route_recommendation/domain/convex_hull.py
# ============================================================

from typing import List, Sequence

from route_recommendation.domain.entities import GeoPoint


def _cross(o: GeoPoint, a: GeoPoint, b: GeoPoint) -> float:
    """Produto vetorial 2D de (a - o) x (b - o) no plano (lat, lon)."""
    return (
        (a.latitude - o.latitude) * (b.longitude - o.longitude)
        - (a.longitude - o.longitude) * (b.latitude - o.latitude)
    )


def _sq_dist(a: GeoPoint, b: GeoPoint) -> float:
    return (a.latitude - b.latitude) ** 2 + (a.longitude - b.longitude) ** 2


def convex_hull(points: Sequence[GeoPoint]) -> List[GeoPoint]:
    """
    Envoltória convexa por gift wrapping (Jarvis march).

    Parte do ponto de menor latitude (desempate: menor longitude) e escolhe,
    a cada passo, o ponto que deixa todos os demais do mesmo lado. Pontos
    colineares na aresta são pulados (fica o mais distante). O anel não
    repete o ponto inicial no final.

    Menos de 3 pontos: devolve a entrada sem alteração.
    """
    if len(points) < 3:
        return list(points)

    # duplicatas travariam a caminhada
    pts = list(dict.fromkeys(points))
    if len(pts) < 3:
        return pts

    start = 0
    for i in range(1, len(pts)):
        if (pts[i].latitude, pts[i].longitude) < (pts[start].latitude, pts[start].longitude):
            start = i

    hull = []
    current = start
    for _ in range(len(pts)):
        hull.append(pts[current])
        nxt = 0 if current != 0 else 1
        for i in range(len(pts)):
            if i == current:
                continue
            turn = _cross(pts[current], pts[nxt], pts[i])
            if turn < 0 or (
                turn == 0 and _sq_dist(pts[current], pts[i]) > _sq_dist(pts[current], pts[nxt])
            ):
                nxt = i
        current = nxt
        if current == start:
            break

    return hull


def cluster_boundary(cluster) -> List[GeoPoint]:
    """Polígono de contorno dos membros de um Cluster (para visualização externa)."""
    return convex_hull([c.location for c in cluster.members])
