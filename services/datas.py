# services/datas.py
import calendar
from datetime import date, datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

# Fuso civil do negócio: toda comparação de "dias até vencer" usa este dia
CIVIL_TZ = ZoneInfo("America/Sao_Paulo")


def normalize_date(value: Any) -> Optional[date]:
    """
    Converte o valor armazenado em uma data de calendário.

    Aceita `date`, `datetime` e strings 'YYYY-MM-DD' (com ou sem horário após
    o 'T'). Ano, mês e dia são lidos como inteiros, sem passar por conversão
    de fuso, então o dia gravado nunca "anda" para trás ou para frente.
    Retorna None para vazio ou inválido; nunca levanta exceção.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    s = value.strip().split("T", 1)[0]
    if not s:
        return None

    parts = s.split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None

    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def get_today() -> date:
    """Dia atual em America/Sao_Paulo (recalculado a cada chamada)."""
    return datetime.now(CIVIL_TZ).date()


def add_months(d: date, months: int) -> date:
    """Adiciona 'months' meses à data 'd', ajustando o dia para o último dia do mês quando necessário."""
    year = d.year + (d.month - 1 + months) // 12
    month = (d.month - 1 + months) % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def to_iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


def fmt_date_br(value: Any) -> str:
    """
    Formata qualquer data como 'dd/mm/aaaa' ou '—' quando inválida.
    """
    obj = normalize_date(value)
    return obj.strftime("%d/%m/%Y") if obj else "—"


def parse_date_br(value: Any) -> Optional[date]:
    """Lê 'dd/mm/aaaa' (formato dos comprovantes). None se inválido."""
    if not isinstance(value, str) or value.count("/") != 2:
        return None
    d, m, y = value.strip().split("/")
    return normalize_date(f"{y}-{m}-{d}")
