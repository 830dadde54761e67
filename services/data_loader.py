# services/data_loader.py
import logging
from datetime import datetime

import requests
import streamlit as st

from services.app_context import get_context, cache_key
from services.datas import CIVIL_TZ
from services.errors import PersistenceError
from services.sweep import run_full_sweep, sweep_due
from services import schemas
from supabase_service import SupabaseError

logger = logging.getLogger("painel")

# tabela -> (from_db, to_db, coluna de ordenação, desc)
TABLES = {
    "clients": (schemas.map_client_from_db, schemas.map_client_to_db, "created_at", False),
    "resellers": (schemas.map_reseller_from_db, schemas.map_reseller_to_db, "created_at", False),
    "plans": (schemas.map_plan_from_db, schemas.map_plan_to_db, "created_at", True),
    "message_templates": (schemas.map_template_from_db, schemas.map_template_to_db, "created_at", True),
    "receipts": (schemas.map_receipt_from_db, schemas.map_receipt_to_db, "created_at", True),
    "pix_configs": (schemas.map_pix_from_db, schemas.map_pix_to_db, "created_at", False),
}

_STORE_ERRORS = (SupabaseError, requests.exceptions.RequestException)


class TableStore:
    """
    Coleção de uma tabela do Supabase no formato do app.
    Qualquer falha de rede/HTTP vira PersistenceError.
    """

    def __init__(self, svc, table: str, from_db, to_db, order: str = "created_at", desc: bool = False):
        self.svc = svc
        self.table = table
        self.from_db = from_db
        self.to_db = to_db
        self.order = order
        self.desc = desc

    def get_all(self) -> list:
        try:
            rows = self.svc.select(self.table, order=self.order, desc=self.desc)
        except _STORE_ERRORS as e:
            raise PersistenceError(f"Erro ao buscar {self.table}: {e}", table=self.table) from e
        return schemas.map_many(rows, self.from_db)

    def get_by_id(self, item_id):
        try:
            row = self.svc.select_one(self.table, item_id)
        except _STORE_ERRORS as e:
            raise PersistenceError(f"Erro ao buscar {self.table}/{item_id}: {e}", self.table, item_id) from e
        return self.from_db(row)

    def create(self, item: dict) -> dict:
        try:
            rows = self.svc.insert(self.table, [self.to_db(item)])
        except _STORE_ERRORS as e:
            raise PersistenceError(f"Erro ao criar em {self.table}: {e}", table=self.table) from e
        return self.from_db(rows[0]) if rows else None

    def update(self, item_id, fields: dict) -> dict:
        """Atualização parcial: só os campos informados."""
        payload = self.to_db(fields, partial=True)
        try:
            row = self.svc.update(self.table, item_id, payload)
        except _STORE_ERRORS as e:
            raise PersistenceError(f"Erro ao atualizar {self.table}/{item_id}: {e}", self.table, item_id) from e
        return self.from_db(row)

    def delete(self, item_id) -> None:
        try:
            self.svc.delete(self.table, item_id)
        except _STORE_ERRORS as e:
            raise PersistenceError(f"Erro ao remover {self.table}/{item_id}: {e}", self.table, item_id) from e


def get_stores(svc) -> dict:
    return {
        table: TableStore(svc, table, from_db, to_db, order, desc)
        for table, (from_db, to_db, order, desc) in TABLES.items()
    }


@st.cache_data(ttl=60, show_spinner=False)
def load_all(cache_key: tuple) -> dict:
    """
    Lê todas as tabelas (já convertidas para o formato do app).
    'cache_key' identifica a conexão (url, user_id) para o cache.
    """
    ctx = get_context()
    if not ctx.get("connected"):
        raise RuntimeError("Não conectado ao Supabase. Informe URL e chave na barra lateral.")

    svc = ctx.get("db")
    if svc is None:
        raise RuntimeError("SupabaseService não está inicializado.")

    data = {}
    for table, store in get_stores(svc).items():
        data[table] = store.get_all()
    logger.info(f"Dados carregados: {', '.join(f'{t}={len(v)}' for t, v in data.items())}")
    return data


def load_or_stop() -> dict:
    """load_all da conexão atual; em falha mostra o erro e interrompe a página."""
    try:
        return load_all(cache_key())
    except (PersistenceError, RuntimeError) as e:
        st.error(str(e))
        st.stop()


def run_scheduled_sweep(ctx) -> list:
    """
    Varredura de status na primeira execução da sessão e depois a cada hora.
    Devolve os resultados (lista vazia quando ainda não era hora).
    """
    agora = datetime.now(CIVIL_TZ)
    if not sweep_due(ctx.get("last_sweep"), agora):
        return []

    results = run_full_sweep(get_stores(ctx["db"]))
    ctx["last_sweep"] = agora
    if any(r.changed for r in results):
        st.cache_data.clear()
    return results
