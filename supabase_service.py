# supabase_service.py
import requests
import logging
import time
import random
from time import sleep
from typing import Any, Optional

logger = logging.getLogger("painel")
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)


class SupabaseError(RuntimeError):
    """Falha HTTP devolvida pela API REST do Supabase."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SupabaseService:
    """
    Cliente da API REST (PostgREST) de um projeto Supabase.
    Cada tabela é tratada como uma coleção de registros com 'id'.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        user_id: Optional[str] = None,
        request_timeout: int = 15,
        max_retries: int = 2,
        user_agent: str = "painel-iptv-streamlit",
    ):
        if not url or not api_key:
            raise ValueError("URL e chave do Supabase são obrigatórias.")

        self.session = requests.Session()
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
            "User-Agent": user_agent,
        })

        self.base_url = url.rstrip("/")
        self.user_id = user_id or None
        self.timeout = request_timeout
        self.max_retries = max_retries

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _scope(self, params: dict) -> dict:
        # Isolamento por usuário: toda consulta filtra user_id quando configurado
        if self.user_id:
            params["user_id"] = f"eq.{self.user_id}"
        return params

    # Retry com backoff + jitter (429 / 503 / timeouts)
    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        for attempt in range(self.max_retries + 1):
            try:
                resp = self.session.request(method, url, timeout=self.timeout, **kwargs)

                if resp.status_code == 429 and attempt < self.max_retries:
                    ra = int(resp.headers.get("Retry-After", "1"))
                    logger.warning(f"429 recebido. Aguardando {ra}s.")
                    time.sleep(ra)
                    continue

                if resp.status_code == 503 and attempt < self.max_retries:
                    t = 1 + random.uniform(0.3, 0.9)
                    logger.warning(f"Supabase indisponível (503). Sleep {t:.1f}s.")
                    time.sleep(t)
                    continue

                return resp

            except requests.exceptions.Timeout:
                if attempt < self.max_retries:
                    sleep(0.8 + random.uniform(0.2, 0.6))
                    continue
                raise

            except requests.exceptions.RequestException as e:
                if attempt < self.max_retries:
                    sleep(0.8)
                    continue
                raise e

    def _check(self, resp: requests.Response, action: str) -> requests.Response:
        if 200 <= resp.status_code < 300:
            return resp
        raise SupabaseError(
            f"Erro ao {action}: {resp.status_code}\n{resp.text}",
            status_code=resp.status_code,
            body=resp.text,
        )

    def select(
        self,
        table: str,
        order: Optional[str] = None,
        desc: bool = False,
        filters: Optional[dict] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list:
        """
        Lista registros da tabela.
        'filters' recebe pares coluna -> valor comparados por igualdade.
        """
        params = {"select": "*"}
        for col, val in (filters or {}).items():
            params[col] = f"eq.{val}"
        if order:
            params["order"] = f"{order}.{'desc' if desc else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)
            params["offset"] = str(offset)

        r = self._request("GET", self._table_url(table), params=self._scope(params))
        self._check(r, f"ler {table}")
        data = r.json()
        return data if isinstance(data, list) else []

    def select_one(self, table: str, item_id: Any) -> Optional[dict]:
        rows = self.select(table, filters={"id": item_id})
        return rows[0] if rows else None

    def insert(self, table: str, rows: list) -> list:
        """Insere um ou mais registros. Retorna os registros criados."""
        if self.user_id:
            rows = [{**row, "user_id": self.user_id} for row in rows]
        r = self._request("POST", self._table_url(table), json=rows)
        self._check(r, f"inserir em {table}")
        return r.json() or []

    def update(self, table: str, item_id: Any, fields: dict) -> Optional[dict]:
        """Atualiza apenas os campos informados do registro 'item_id'."""
        params = self._scope({"id": f"eq.{item_id}"})
        r = self._request("PATCH", self._table_url(table), params=params, json=fields)
        self._check(r, f"atualizar {table}/{item_id}")
        data = r.json() or []
        if isinstance(data, dict):
            data = [data]
        if not data:
            raise SupabaseError(f"Registro {table}/{item_id} não encontrado.", status_code=404)
        return data[0]

    def delete(self, table: str, item_id: Any) -> None:
        params = self._scope({"id": f"eq.{item_id}"})
        r = self._request("DELETE", self._table_url(table), params=params)
        self._check(r, f"remover {table}/{item_id}")

    def count(self, table: str) -> int:
        params = self._scope({"select": "id"})
        r = self._request(
            "HEAD", self._table_url(table), params=params,
            headers={"Prefer": "count=exact"},
        )
        self._check(r, f"contar {table}")
        # Content-Range: 0-24/3573
        total = r.headers.get("Content-Range", "*/0").split("/")[-1]
        return int(total) if total.isdigit() else 0

    def ping(self) -> bool:
        try:
            r = self._request("GET", f"{self.base_url}/rest/v1/", params={})
        except requests.exceptions.RequestException:
            return False
        return r.status_code == 200
