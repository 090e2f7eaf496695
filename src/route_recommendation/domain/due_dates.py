# ============================================================
# 📦 src/route_recommendation/domain/due_dates.py
# ============================================================

from datetime import date, datetime, timedelta
from typing import Optional

import pandas as pd

from route_recommendation.domain.entities import CustomerLocation, ServiceRecord


def add_months(d: date, months: int) -> date:
    """Soma meses de calendário; o dia é limitado ao fim do mês (31/01 + 1 → 28/02)."""
    return (pd.Timestamp(d) + pd.DateOffset(months=int(months))).date()


def _as_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def service_due_date(service: ServiceRecord) -> Optional[date]:
    next_due = _as_date(service.next_due)
    if next_due:
        return next_due
    last_done = _as_date(service.last_done)
    if last_done:
        return add_months(last_done, service.interval_months or 12)
    return None


def resolve_next_due_date(customer: CustomerLocation) -> Optional[date]:
    """
    Próxima data de visita do cliente:
    1. next_due_date explícita, se houver;
    2. senão, a mais cedo entre os serviços (next_due ou last_done + intervalo).

    A data explícita sempre vence, mesmo que um serviço vença antes. Uma linha
    de planilha com neste_kontroll e siste_kontroll preenchidos usa neste_kontroll.
    """
    explicit = _as_date(customer.next_due_date)
    if explicit:
        return explicit

    dates = [d for d in (service_due_date(s) for s in customer.services or ()) if d]
    return min(dates) if dates else None


def horizon_end(today: date, days_ahead: int) -> date:
    return today + timedelta(days=days_ahead)


def is_overdue(customer: CustomerLocation, today: date) -> bool:
    due = resolve_next_due_date(customer)
    return due is not None and due < today
