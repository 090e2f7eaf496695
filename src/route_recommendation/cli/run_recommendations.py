# ============================================================
# 📦 src/route_recommendation/cli/run_recommendations.py
# ============================================================

import argparse
import json
import sys
from datetime import date

from loguru import logger

from route_recommendation.application.recommendation_use_case import RecommendationEngine
from route_recommendation.config.settings import LOG_LEVEL, default_depot
from route_recommendation.domain.entities import ClusterParameters, GeoPoint
from route_recommendation.infrastructure.customer_loader import load_customers


def validar_data(valor: str) -> date:
    try:
        return date.fromisoformat(valor)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Data inválida: '{valor}' (use AAAA-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recomendação de rotas de visita por clusterização geográfica"
    )

    # OBRIGATÓRIO
    parser.add_argument("--input", required=True, help="CSV/XLSX com os clientes")

    # Parâmetros (default: variáveis de ambiente)
    parser.add_argument("--days-ahead", type=int)
    parser.add_argument("--max-customers", type=int)
    parser.add_argument("--max-travel", type=int, help="Tempo máximo (min)")
    parser.add_argument("--min-cluster-size", type=int)
    parser.add_argument("--radius", type=float, help="Raio do cluster (km)")
    parser.add_argument("--service", type=int, help="Tempo de serviço por parada (min)")

    parser.add_argument("--depot-lat", type=float)
    parser.add_argument("--depot-lon", type=float)
    parser.add_argument("--today", type=validar_data, help="Data de referência (AAAA-MM-DD)")
    parser.add_argument("--workers", type=int, help="Threads para o cálculo de score")

    parser.add_argument("--output", help="Arquivo JSON de saída")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper(), colorize=True,
               format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")

    try:
        params = ClusterParameters.from_env(
            days_ahead_horizon=args.days_ahead,
            max_customers_per_cluster=args.max_customers,
            max_travel_minutes=args.max_travel,
            min_cluster_size=args.min_cluster_size,
            cluster_radius_km=args.radius,
            service_time_minutes_per_stop=args.service,
        )
    except ValueError as e:
        logger.error(f"❌ Parâmetros inválidos: {e}")
        return 2

    depot = default_depot()
    if args.depot_lat is not None and args.depot_lon is not None:
        depot = GeoPoint(args.depot_lat, args.depot_lon)
    if not depot.is_valid:
        logger.error(f"❌ Depósito inválido: {depot}")
        return 2

    logger.info("==============================================")
    logger.info("🚀 Iniciando recomendação via CLI")
    logger.info("==============================================")
    logger.info(f"📂 input              = {args.input}")
    logger.info(f"🏠 depósito           = ({depot.latitude:.5f}, {depot.longitude:.5f})")
    for nome, valor in params.to_dict().items():
        logger.info(f"⚙️ {nome:<30}= {valor}")

    customers = load_customers(args.input)
    engine = RecommendationEngine(params=params, depot=depot, max_workers=args.workers)
    result = engine.generate_report(customers, today=args.today)

    print("\n=== RECOMENDAÇÕES ===")
    print(f"estratégia: {result.strategy} | elegíveis: {result.eligible_count} | ruído: {len(result.noise_ids)}")
    for c in result.clusters:
        print(
            f"#{c.id} {c.primary_area_name}: {c.member_count} clientes | score={c.efficiency_score} "
            f"| {c.estimated_travel_minutes} min | {c.estimated_km} km | atrasados={c.overdue_count}"
        )
    if result.diagnostics:
        print(f"motivo: {result.diagnostics['reason']}")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2, default=str)
        logger.success(f"💾 Resultado salvo em {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
