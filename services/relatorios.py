# services/relatorios.py
"""
Indicadores do painel.

Este módulo centraliza:
- contadores do dashboard (ativos, vencendo hoje)
- lista de próximos vencimentos
- receita estimada por plano (clientes ativos)
- faturamento por mês a partir dos comprovantes
"""

from datetime import date
from typing import Optional

import pandas as pd

from services.datas import normalize_date, get_today, parse_date_br
from services.utils import parse_price
from services.vencimento import days_until_expiry


def _active_expiring_today(subs: list, today: date) -> int:
    return sum(
        1 for s in subs
        if s.get("status") == "active" and normalize_date(s.get("expiryDate")) == today
    )


def dashboard_stats(clients: list, resellers: list, today: Optional[date] = None) -> dict:
    today = today or get_today()
    clients = [c for c in clients or [] if isinstance(c, dict)]
    resellers = [r for r in resellers or [] if isinstance(r, dict)]
    return {
        "active_clients": sum(1 for c in clients if c.get("status") == "active"),
        "active_resellers": sum(1 for r in resellers if r.get("status") == "active"),
        "clients_expiring_today": _active_expiring_today(clients, today),
        "resellers_expiring_today": _active_expiring_today(resellers, today),
    }


def upcoming_expirations(subs: list, today: Optional[date] = None, days: int = 5) -> pd.DataFrame:
    """
    Ativos que vencem depois de hoje e em até 'days' dias, do mais próximo ao mais distante.
    """
    today = today or get_today()
    rows = []
    for s in subs or []:
        if not isinstance(s, dict) or s.get("status") != "active":
            continue
        expiry = normalize_date(s.get("expiryDate"))
        if expiry is None:
            continue
        diff = days_until_expiry(expiry, today)
        if 0 < diff <= days:
            rows.append({"Nome": s.get("name", ""), "Vencimento": expiry, "Dias": diff})

    if not rows:
        return pd.DataFrame(columns=["Nome", "Vencimento", "Dias"])
    return pd.DataFrame(rows).sort_values("Dias", kind="stable").reset_index(drop=True)


def revenue_by_plan(clients: list, plans: list) -> pd.DataFrame:
    """
    Receita mensal estimada por plano (soma do preço para cada cliente ativo).
    Colunas: Plano, Clientes, Receita.
    """
    cols = ["Plano", "Clientes", "Receita"]
    if not plans:
        return pd.DataFrame(columns=cols)

    ativos = pd.DataFrame([c for c in clients or [] if isinstance(c, dict) and c.get("status") == "active"])
    counts = ativos["plan"].value_counts() if not ativos.empty and "plan" in ativos else pd.Series(dtype=int)

    rows = []
    for p in plans:
        n = int(counts.get(p.get("name"), 0))
        rows.append({"Plano": p.get("name", ""), "Clientes": n, "Receita": n * parse_price(p.get("price"))})
    return pd.DataFrame(rows, columns=cols)


def receipts_by_month(receipts: list) -> pd.Series:
    """
    Soma dos comprovantes por competência 'AAAA-MM' (ordenado).
    """
    if not receipts:
        return pd.Series(dtype=float)

    df = pd.DataFrame(receipts)
    if "date" not in df or "amount" not in df:
        return pd.Series(dtype=float)

    df["data"] = df["date"].map(lambda v: parse_date_br(v) or normalize_date(v))
    df = df.dropna(subset=["data"])
    if df.empty:
        return pd.Series(dtype=float)

    df["valor"] = df["amount"].map(parse_price)
    df["competencia"] = df["data"].map(lambda d: f"{d.year}-{d.month:02d}")
    return df.groupby("competencia")["valor"].sum().sort_index()
