# ============================================================
# 📦 src/route_recommendation/infrastructure/customer_loader.py
# ============================================================

import os
from datetime import date
from typing import List, Optional

import numpy as np
import pandas as pd
from loguru import logger

from route_recommendation.domain.entities import CustomerLocation, GeoPoint, ServiceRecord


# ============================================================
# 🔤 Aliases de colunas aceitos
# ============================================================
COLUMN_ALIASES = {
    "id": ("id", "customer_id", "kunde_id"),
    "lat": ("lat", "latitude"),
    "lon": ("lon", "lng", "longitude"),
    "name": ("name", "display_name", "navn", "nome"),
    "area": ("area", "area_name", "poststed", "cidade"),
    "category": ("category", "kategori"),
    "next_due": ("next_due_date", "next_due", "neste_kontroll"),
    "last_done": ("last_done", "siste_kontroll"),
    "interval_months": ("interval_months", "intervall_months"),
}

REQUIRED = ("lat", "lon")


def detectar_separador(path: str) -> str:
    """Detecta automaticamente o separador do CSV."""
    with open(path, "r", encoding="utf-8-sig") as f:
        linha = f.readline()
        return ";" if ";" in linha else ","


def normalizar_colunas(df: pd.DataFrame) -> pd.DataFrame:
    df.columns = (
        df.columns
        .astype(str)
        .str.strip()
        .str.lower()
        .str.normalize("NFC")
    )
    renames = {}
    for canonical, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in df.columns:
                renames[alias] = canonical
                break
    return df.rename(columns=renames)


def read_table(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".csv", ".txt"):
        return pd.read_csv(path, sep=detectar_separador(path), encoding="utf-8-sig")
    if ext == ".xlsx":
        return pd.read_excel(path, engine="openpyxl")
    raise ValueError(f"Formato de arquivo não suportado: {ext}")


# ============================================================
# 🧹 Conversões tolerantes (linha inválida vira None/NaN)
# ============================================================
def _to_float(value) -> float:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return float("nan")
    try:
        return float(str(value).strip().replace(",", "."))
    except ValueError:
        return float("nan")


def _to_date(value) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    ts = pd.to_datetime(value, errors="coerce", dayfirst=False)
    if pd.isna(ts):
        return None
    return ts.date()


def _to_text(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _to_id(value, fallback):
    if value is None:
        return fallback
    if isinstance(value, np.generic):
        return value.item()
    return value


def dataframe_to_customers(df: pd.DataFrame) -> List[CustomerLocation]:
    df = normalizar_colunas(df.copy())

    missing = [c for c in REQUIRED if c not in df.columns]
    if missing:
        raise ValueError(f"Colunas obrigatórias ausentes: {missing}")

    df = df.astype(object).replace({np.nan: None})

    customers = []
    invalid = 0
    for idx, row in enumerate(df.to_dict(orient="records")):
        location = GeoPoint(_to_float(row.get("lat")), _to_float(row.get("lon")))
        if not location.is_valid:
            invalid += 1

        services = ()
        last_done = _to_date(row.get("last_done"))
        if last_done:
            interval = _to_float(row.get("interval_months"))
            services = (
                ServiceRecord(
                    service_type=_to_text(row.get("category")),
                    last_done=last_done,
                    interval_months=int(interval) if np.isfinite(interval) else 12,
                ),
            )

        customers.append(
            CustomerLocation(
                id=_to_id(row.get("id"), idx),
                location=location,
                display_name=_to_text(row.get("name")) or "",
                area_name=_to_text(row.get("area")),
                category=_to_text(row.get("category")),
                next_due_date=_to_date(row.get("next_due")),
                services=services,
            )
        )

    if invalid:
        logger.warning(f"⚠️ {invalid} cliente(s) com coordenadas inválidas (serão ignorados pelo motor)")
    logger.info(f"📦 {len(customers)} clientes carregados")
    return customers


def load_customers(path: str) -> List[CustomerLocation]:
    """Lê um snapshot de clientes (CSV ou Excel)."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Arquivo não encontrado: {path}")
    logger.info(f"📂 Lendo clientes de {path}")
    return dataframe_to_customers(read_table(path))
