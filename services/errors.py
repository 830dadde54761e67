# services/errors.py
from typing import Any, Optional


class PainelError(Exception):
    """Base dos erros de domínio do painel."""


class PlanNotFoundError(PainelError, LookupError):
    """Renovação pedida para um plano que não existe no cadastro."""

    def __init__(self, plan_name: Optional[str]):
        self.plan_name = plan_name
        super().__init__(
            f'Plano "{plan_name or ""}" não encontrado. Verifique o cadastro de planos.'
        )


class PersistenceError(PainelError):
    """
    Falha ao gravar no Supabase.
    Em renovações, 'result' guarda o cálculo feito para não ser perdido.
    """

    def __init__(self, message: str, table: str = "", item_id: Any = None, result: Any = None):
        super().__init__(message)
        self.table = table
        self.item_id = item_id
        self.result = result
