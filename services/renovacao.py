# services/renovacao.py
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from services.datas import normalize_date, get_today, add_months, to_iso
from services.errors import PlanNotFoundError, PersistenceError

logger = logging.getLogger("painel")

DEFAULT_DURATION_DAYS = 30


@dataclass
class RenewalResult:
    entity: dict
    plan: dict
    months: int
    base_date: date
    new_expiry: date


def find_plan(plans: list, name: Optional[str]) -> dict:
    """Busca o plano pelo nome (o cliente guarda o nome, não o id)."""
    for p in plans or []:
        if isinstance(p, dict) and name and p.get("name") == name:
            return p
    raise PlanNotFoundError(name)


def plan_duration_days(plan: dict) -> int:
    """Duração em dias; 30 quando ausente, inválida ou não positiva."""
    try:
        days = int(str(plan.get("duration", "")).strip())
    except (TypeError, ValueError):
        return DEFAULT_DURATION_DAYS
    return days if days > 0 else DEFAULT_DURATION_DAYS


def months_for_duration(days: int) -> int:
    # Meses inteiros: 45 dias -> 1 mês, 90 -> 3, 15 -> 0
    return days // 30


def renew(entity: dict, plans: list, today: Optional[date] = None) -> RenewalResult:
    """
    Calcula a renovação sem gravar nada.
    - vencido (ou sem vencimento): conta a partir de hoje
    - em dia: conta a partir do vencimento atual
    O status volta para 'active' seja qual for o anterior.
    """
    plan = find_plan(plans, entity.get("plan"))
    today = today or get_today()

    months = months_for_duration(plan_duration_days(plan))
    current = normalize_date(entity.get("expiryDate")) or today
    base = max(current, today)
    new_expiry = add_months(base, months)

    updated = {**entity, "expiryDate": to_iso(new_expiry), "status": "active"}
    return RenewalResult(entity=updated, plan=plan, months=months, base_date=base, new_expiry=new_expiry)


def renew_and_save(store: Any, entity: dict, plans: list, today: Optional[date] = None) -> RenewalResult:
    """
    Renova e grava. Em falha de gravação levanta PersistenceError
    com o resultado calculado em `.result`.
    """
    result = renew(entity, plans, today)
    fields = {"expiryDate": result.entity["expiryDate"], "status": "active"}
    try:
        store.update(entity["id"], fields)
    except PersistenceError as e:
        logger.error(f"Renovação de {entity.get('id')} calculada mas não gravada: {e}")
        e.result = result
        raise
    logger.info(f"Renovado {entity.get('id')}: novo vencimento {result.entity['expiryDate']}")
    return result
