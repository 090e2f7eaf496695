# ============================================================
# 📦 src/route_recommendation/application/recommendation_use_case.py
# ============================================================

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from route_recommendation.application.diagnostics import explain_empty_result
from route_recommendation.config.settings import default_depot
from route_recommendation.domain.area_grouping import group_by_area
from route_recommendation.domain.dbscan_clusterer import DBSCANClusterer
from route_recommendation.domain.due_dates import horizon_end, resolve_next_due_date
from route_recommendation.domain.efficiency_scorer import MIN_SCORABLE_SIZE, EfficiencyScorer
from route_recommendation.domain.entities import (
    Cluster,
    ClusterParameters,
    CustomerLocation,
    GeoPoint,
    RecommendationResult,
)
from route_recommendation.domain.geo_math import distance_km


STRATEGY_DBSCAN = "dbscan"
STRATEGY_DBSCAN_RELAXED = "dbscan_relaxed"
STRATEGY_AREA_FALLBACK = "area_fallback"
STRATEGY_NONE = "none"

RETRY_MIN_ELIGIBLE = 3
RETRY_RADIUS_FACTOR = 2.0


class RecommendationEngine:
    """
    Gera recomendações de visitas agrupadas:
      1️⃣ filtra clientes com coordenada válida e visita dentro do horizonte
      2️⃣ DBSCAN com o raio configurado
      3️⃣ DBSCAN com raio dobrado, se nada foi encontrado
      4️⃣ agrupamento por área (fallback)
      5️⃣ score, descarte (lento E grande), corte dos excedentes e ranking

    Sem estado entre chamadas: mesma entrada e parâmetros → mesmo resultado.
    """

    def __init__(
        self,
        params: Optional[ClusterParameters] = None,
        depot: Optional[GeoPoint] = None,
        max_workers: Optional[int] = None,
    ):
        self.params = params or ClusterParameters()
        self.depot = depot or default_depot()
        if not self.depot.is_valid:
            raise ValueError(f"Depósito com coordenadas inválidas: {self.depot}")
        self.max_workers = max_workers

    # ============================================================
    # ✅ Elegibilidade
    # ============================================================
    def filter_eligible(self, customers: Sequence[CustomerLocation], today: date) -> List[CustomerLocation]:
        limit = horizon_end(today, self.params.days_ahead_horizon)
        eligible = []
        for c in customers or ():
            if c is None or not c.location.is_valid:
                continue
            due = resolve_next_due_date(c)
            if due is None or due > limit:
                continue
            eligible.append(c)
        return eligible

    # ============================================================
    # 🚀 API pública
    # ============================================================
    def generate_recommendations(
        self,
        customers: Sequence[CustomerLocation],
        today: Optional[date] = None,
    ) -> List[Cluster]:
        return self.generate_report(customers, today).clusters

    def generate_report(
        self,
        customers: Sequence[CustomerLocation],
        today: Optional[date] = None,
    ) -> RecommendationResult:
        today = today or date.today()
        customers = list(customers or ())

        eligible = self.filter_eligible(customers, today)
        logger.info(
            f"🏁 Recomendação | clientes={len(customers)} | elegíveis={len(eligible)} "
            f"| horizonte={self.params.days_ahead_horizon} dias"
        )

        groups, strategy = self._raw_clusters(eligible)

        scorer = EfficiencyScorer(
            depot=self.depot,
            service_time_minutes_per_stop=self.params.service_time_minutes_per_stop,
            today=today,
        )
        scored = self._score_all(scorer, groups, strategy == STRATEGY_AREA_FALLBACK)
        retained = self._apply_limits(scorer, scored)
        ranked = self._rank(retained)

        kept = {id(m) for cluster in ranked for m in cluster.members}
        noise_ids = [c.id for c in eligible if id(c) not in kept]

        diagnostics = None
        if not ranked:
            strategy = STRATEGY_NONE
            diagnostics = explain_empty_result(customers, self.params, today)
            logger.warning(f"⚠️ Nenhuma recomendação gerada | motivo={diagnostics['reason']}")
        else:
            logger.success(
                f"✅ {len(ranked)} cluster(s) recomendados | estratégia={strategy} | ruído={len(noise_ids)}"
            )

        return RecommendationResult(
            clusters=ranked,
            strategy=strategy,
            eligible_count=len(eligible),
            noise_ids=noise_ids,
            diagnostics=diagnostics,
        )

    # ============================================================
    # 🧩 Clusterização com fallback
    # ============================================================
    def _raw_clusters(self, eligible: List[CustomerLocation]) -> Tuple[List[List[CustomerLocation]], str]:
        p = self.params

        if not eligible:
            return [], STRATEGY_NONE

        if len(eligible) < p.min_cluster_size:
            logger.info(f"🏘️ Poucos clientes ({len(eligible)} < {p.min_cluster_size}) → agrupamento por área")
            return self._area_groups(eligible), STRATEGY_AREA_FALLBACK

        groups, _ = DBSCANClusterer(p.cluster_radius_km, p.min_cluster_size).cluster(eligible)
        logger.info(f"🔎 DBSCAN encontrou {len(groups)} cluster(s) | raio={p.cluster_radius_km} km")
        if groups:
            return groups, STRATEGY_DBSCAN

        if len(eligible) >= RETRY_MIN_ELIGIBLE:
            relaxed = p.cluster_radius_km * RETRY_RADIUS_FACTOR
            groups, _ = DBSCANClusterer(relaxed, p.min_cluster_size).cluster(eligible)
            logger.info(f"🔁 DBSCAN com raio dobrado encontrou {len(groups)} cluster(s) | raio={relaxed} km")
            if groups:
                return groups, STRATEGY_DBSCAN_RELAXED

        logger.info("🏘️ DBSCAN sem clusters → agrupamento por área")
        return self._area_groups(eligible), STRATEGY_AREA_FALLBACK

    def _area_groups(self, eligible):
        return list(group_by_area(eligible).values())

    # ============================================================
    # 📊 Score
    # ============================================================
    def _score_all(self, scorer: EfficiencyScorer, groups, is_area_fallback: bool) -> List[Cluster]:
        scorable = [g for g in groups if len(g) >= MIN_SCORABLE_SIZE]
        if len(scorable) < len(groups):
            logger.debug(f"🧹 {len(groups) - len(scorable)} grupo(s) com menos de {MIN_SCORABLE_SIZE} membros ignorados")

        def _score(members):
            return scorer.score(members, is_area_fallback=is_area_fallback)

        if self.max_workers and self.max_workers > 1 and len(scorable) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return list(executor.map(_score, scorable))
        return [_score(g) for g in scorable]

    # ============================================================
    # ✂️ Limites operacionais
    # ============================================================
    def _apply_limits(self, scorer: EfficiencyScorer, clusters: List[Cluster]) -> List[Cluster]:
        p = self.params
        retained = []
        for cluster in clusters:
            too_slow = cluster.estimated_travel_minutes > p.max_travel_minutes
            too_big = cluster.member_count > p.max_customers_per_cluster
            if too_slow and too_big:
                logger.info(
                    f"🚫 Cluster {cluster.primary_area_name} descartado | n={cluster.member_count} "
                    f"| {cluster.estimated_travel_minutes} min > {p.max_travel_minutes} min"
                )
                continue
            if too_big:
                cluster = self.trim(scorer, cluster)
            retained.append(cluster)
        return retained

    def trim(self, scorer: EfficiencyScorer, cluster: Cluster) -> Cluster:
        """Mantém os N membros mais próximos do centroide e recalcula o score."""
        limit = self.params.max_customers_per_cluster
        ordered = sorted(cluster.members, key=lambda c: distance_km(c.location, cluster.centroid))
        trimmed = scorer.score(ordered[:limit], is_area_fallback=cluster.is_area_fallback)
        trimmed.is_trimmed = True
        logger.info(
            f"✂️ Cluster {cluster.primary_area_name} cortado | {cluster.member_count} → {trimmed.member_count} "
            f"| score {cluster.efficiency_score} → {trimmed.efficiency_score}"
        )
        return trimmed

    # ============================================================
    # 🏆 Ranking
    # ============================================================
    def _rank(self, clusters: List[Cluster]) -> List[Cluster]:
        # sort estável: empates mantêm a ordem de descoberta
        ranked = sorted(clusters, key=lambda c: -c.efficiency_score)
        for idx, cluster in enumerate(ranked):
            cluster.id = idx
        return ranked
