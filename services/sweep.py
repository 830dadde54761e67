# services/sweep.py
"""
Varredura de status.

Percorre uma coleção (clientes ou revendedores), aplica a transição
automática de status e grava somente os registros que mudaram, um por vez.
Falha ao gravar um registro não interrompe a varredura: o erro fica
registrado em `SweepResult.failures` e o próximo registro é processado.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from services.datas import get_today
from services.errors import PersistenceError
from services.status import apply_status_transition

logger = logging.getLogger("painel")

SWEEP_INTERVAL = timedelta(hours=1)


@dataclass
class SweepResult:
    collection: str
    checked: int = 0
    changed: list = field(default_factory=list)
    failures: dict = field(default_factory=dict)
    entities: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def run_status_sweep(store, entities: Optional[list] = None, today: Optional[date] = None) -> SweepResult:
    """
    Aplica `apply_status_transition` em todos os registros.
    - `entities`: snapshot já carregado; se None, lê `store.get_all()`.
    - grava apenas `{"status": ...}` dos registros alterados.
    """
    today = today or get_today()
    if entities is None:
        entities = store.get_all()

    result = SweepResult(collection=getattr(store, "table", ""))

    for ent in entities:
        if not isinstance(ent, dict):
            continue
        result.checked += 1
        novo = apply_status_transition(ent, today)

        if novo.get("status") == ent.get("status"):
            result.entities.append(ent)
            continue

        try:
            store.update(ent["id"], {"status": novo["status"]})
        except PersistenceError as e:
            logger.error(f"Falha ao atualizar status de {result.collection}/{ent.get('id')}: {e}")
            result.failures[ent.get("id")] = str(e)
            result.entities.append(ent)
            continue
        except Exception as e:
            # resposta inesperada do store: registra e segue para o próximo
            logger.exception(f"Erro inesperado ao atualizar {result.collection}/{ent.get('id')}")
            result.failures[ent.get("id")] = f"{type(e).__name__}: {e}"
            result.entities.append(ent)
            continue

        logger.info(f"{result.collection}/{ent['id']}: {ent.get('status')} -> {novo['status']}")
        result.changed.append(ent["id"])
        result.entities.append(novo)

    return result


def run_full_sweep(stores: dict, today: Optional[date] = None) -> list:
    """
    Varre clientes e revendedores de forma independente.
    Erro de leitura de uma coleção vira um resultado com falha; as demais seguem.
    """
    today = today or get_today()
    results = []
    for name in ("clients", "resellers"):
        store = stores.get(name)
        if store is None:
            continue
        try:
            entities = store.get_all()
        except PersistenceError as e:
            logger.error(f"Varredura de {name} não pôde ler a coleção: {e}")
            results.append(SweepResult(collection=name, failures={None: str(e)}))
            continue
        results.append(run_status_sweep(store, entities, today))
    return results


def sweep_due(last_run: Optional[datetime], now: datetime, interval: timedelta = SWEEP_INTERVAL) -> bool:
    """True na primeira execução e sempre que o intervalo tiver passado."""
    if last_run is None:
        return True
    return now - last_run >= interval
