# services/vencimento.py
from datetime import date, timedelta
from typing import Optional

from services.datas import normalize_date, get_today, to_iso

BUCKET_TODAY = "expiring_today"
BUCKET_2 = "expiring_2"
BUCKET_5 = "expiring_5"
BUCKET_OVERDUE = "overdue"
BUCKET_NONE = "none"

BUCKETS = (BUCKET_TODAY, BUCKET_2, BUCKET_5, BUCKET_OVERDUE, BUCKET_NONE)

# Abas da lista de clientes/revendedores
STATUS_VIEWS = ("active", "inactive", "pending", "test")
EXPIRY_VIEWS = ("expiring_5", "expiring_2", "expiring_today")
APP_VIEWS = ("app_expiring_5", "app_expiring_2", "app_expiring_today")
VIEWS = STATUS_VIEWS + EXPIRY_VIEWS + APP_VIEWS

VIEW_LABELS = {
    "active": "Ativos",
    "inactive": "Inativos",
    "pending": "Pendentes",
    "test": "Teste",
    "expiring_5": "Vencimento Plano (5 dias)",
    "expiring_2": "Vencimento Plano (2 dias)",
    "expiring_today": "Vencimento Plano (Hoje)",
    "app_expiring_5": "Vencimento App (5 dias)",
    "app_expiring_2": "Vencimento App (2 dias)",
    "app_expiring_today": "Vencimento App (Hoje)",
}

# Status "atalho" do formulário de cadastro -> dias até o vencimento
EXPIRY_PRESETS = {
    "expiring_today": 0,
    "expiring_2": 2,
    "expiring_5": 5,
}


def days_until_expiry(expiry: Optional[date], today: date) -> Optional[int]:
    """Diferença em dias inteiros (expiry - today). None sem vencimento."""
    if expiry is None:
        return None
    return (expiry - today).days


def classify_bucket(diff_days: Optional[int]) -> str:
    """
    Faixas disjuntas:
      0      -> expiring_today
      1..2   -> expiring_2
      3..5   -> expiring_5
      < 0    -> overdue
      > 5    -> none (também sem vencimento)
    """
    if diff_days is None:
        return BUCKET_NONE
    if diff_days < 0:
        return BUCKET_OVERDUE
    if diff_days == 0:
        return BUCKET_TODAY
    if diff_days <= 2:
        return BUCKET_2
    if diff_days <= 5:
        return BUCKET_5
    return BUCKET_NONE


def subscriber_days(sub: dict, today: Optional[date] = None) -> Optional[int]:
    today = today or get_today()
    return days_until_expiry(normalize_date(sub.get("expiryDate")), today)


def subscriber_bucket(sub: dict, today: Optional[date] = None) -> str:
    return classify_bucket(subscriber_days(sub, today))


def app_expiry_days(sub: dict, today: Optional[date] = None) -> Optional[int]:
    """
    Menor diferença em dias entre as credenciais com 'appExpiryDate'.
    None se nenhuma credencial tiver data de vencimento do app.
    """
    creds = sub.get("credentials")
    if not isinstance(creds, list):
        return None

    today = today or get_today()
    diffs = []
    for cred in creds:
        if not isinstance(cred, dict):
            continue
        d = normalize_date(cred.get("appExpiryDate"))
        if d is not None:
            diffs.append(days_until_expiry(d, today))
    return min(diffs) if diffs else None


def app_expiry_bucket(sub: dict, today: Optional[date] = None) -> str:
    return classify_bucket(app_expiry_days(sub, today))


def matches_view(sub: dict, view: str, today: Optional[date] = None) -> bool:
    """Regra de cada aba da lista."""
    today = today or get_today()
    status = sub.get("status")

    if view in APP_VIEWS:
        return app_expiry_bucket(sub, today) == view[len("app_"):]

    if view in EXPIRY_VIEWS:
        if status != "active":
            return False
        diff = subscriber_days(sub, today)
        if diff is None:
            return False
        return classify_bucket(diff) == view

    return status == view


def _matches_search(sub: dict, search: str) -> bool:
    if not search:
        return True
    term = search.strip().lower()
    return term in (sub.get("name") or "").lower() or term in (sub.get("phone") or "")


def filter_subscribers(subs: list, view: str, search: str = "", today: Optional[date] = None) -> list:
    today = today or get_today()
    return [
        s for s in subs
        if isinstance(s, dict) and _matches_search(s, search) and matches_view(s, view, today)
    ]


def count_by_view(subs: list, today: Optional[date] = None) -> dict:
    today = today or get_today()
    return {v: len(filter_subscribers(subs, v, today=today)) for v in VIEWS}


def apply_expiry_preset(sub: dict, today: Optional[date] = None) -> dict:
    """
    Cadastro rápido: status 'expiring_today' / 'expiring_2' / 'expiring_5'
    vira vencimento hoje / +2 / +5 dias com status 'active'.
    """
    days = EXPIRY_PRESETS.get(sub.get("status"))
    if days is None:
        return sub
    today = today or get_today()
    out = dict(sub)
    out["expiryDate"] = to_iso(today + timedelta(days=days))
    out["status"] = "active"
    return out
