# services/status.py
from datetime import date
from typing import Optional

from services.datas import normalize_date, get_today
from services.vencimento import days_until_expiry

STATUS = (
    "active",    # em dia
    "inactive",  # vencido (automático) ou desativado
    "pending",   # aguardando pagamento/ativação
    "test",      # teste: fora do processamento automático
)

# ---------------------------------------------------------
# Transição automática: vencimento passou -> inactive
# ---------------------------------------------------------
def apply_status_transition(entity: dict, today: Optional[date] = None) -> dict:
    """
    Devolve o registro com o status que deveria ter hoje.
    Regra:
    - 'test' e 'inactive' nunca mudam sozinhos
    - sem vencimento (ou vencimento inválido) não muda
    - vencimento no passado -> 'inactive'
    Nunca altera o dict recebido; quando há mudança devolve uma cópia.
    """
    if entity.get("status") in ("test", "inactive"):
        return entity

    expiry = normalize_date(entity.get("expiryDate"))
    if expiry is None:
        return entity

    diff = days_until_expiry(expiry, today or get_today())
    if diff < 0:
        return {**entity, "status": "inactive"}
    return entity


def status_badge(sts: str) -> str:
    """Representação visual do status (somente UI)."""
    return {
        "active": "🟢 Ativo",
        "inactive": "🔴 Inativo",
        "pending": "🟡 Pendente",
        "test": "🔵 Teste",
    }.get(sts, sts or "—")
