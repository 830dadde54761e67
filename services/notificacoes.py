# services/notificacoes.py
from dataclasses import dataclass
from datetime import date
from typing import MutableMapping, Optional

from services.datas import normalize_date, get_today, fmt_date_br
from services.vencimento import days_until_expiry

KEY_PREFIX = "expiry_notified_30_"

# Margem de 1 dia em volta dos 30
WINDOW_MIN = 29
WINDOW_MAX = 31


class NotifiedStore:
    """
    IDs já avisados por dia de calendário.
    O armazenamento é injetado: `st.session_state` no app, dict nos testes.
    """

    def __init__(self, backing: Optional[MutableMapping] = None):
        self.backing = backing if backing is not None else {}

    def _key(self, day: date) -> str:
        return f"{KEY_PREFIX}{day.isoformat()}"

    def notified(self, day: date) -> set:
        return set(self.backing.get(self._key(day), []))

    def was_notified(self, day: date, item_id) -> bool:
        return item_id in self.notified(day)

    def mark(self, day: date, item_id) -> None:
        ids = list(self.backing.get(self._key(day), []))
        if item_id not in ids:
            ids.append(item_id)
        self.backing[self._key(day)] = ids

    def prune(self, today: date) -> None:
        """Remove as chaves de dias anteriores."""
        current = self._key(today)
        for k in [k for k in list(self.backing.keys()) if str(k).startswith(KEY_PREFIX)]:
            if k != current:
                del self.backing[k]


@dataclass
class ExpiryNotice:
    id: object
    name: str
    days: int
    expiry: date

    @property
    def title(self) -> str:
        return "⚠️ Aviso de Vencimento"

    @property
    def message(self) -> str:
        return f'O app do cliente "{self.name}" vence em {self.days} dias ({fmt_date_br(self.expiry)}).'


def check_expiring_30_days(subscribers: list, store: NotifiedStore, today: Optional[date] = None) -> list:
    """
    Avisos de quem vence em ~30 dias (29 a 31), no máximo um por registro por dia.
    Ignora 'test', 'inactive' e registros sem vencimento.
    """
    today = today or get_today()
    store.prune(today)

    notices = []
    for sub in subscribers or []:
        if not isinstance(sub, dict):
            continue
        if sub.get("status") in ("test", "inactive"):
            continue
        expiry = normalize_date(sub.get("expiryDate"))
        if expiry is None:
            continue

        diff = days_until_expiry(expiry, today)
        if not (WINDOW_MIN <= diff <= WINDOW_MAX):
            continue
        if store.was_notified(today, sub.get("id")):
            continue

        notices.append(ExpiryNotice(id=sub.get("id"), name=sub.get("name") or "", days=diff, expiry=expiry))
        store.mark(today, sub.get("id"))

    return notices
