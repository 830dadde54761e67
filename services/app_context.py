# services/app_context.py
import streamlit as st

from supabase_service import SupabaseService

DEFAULT_PANEL_TITLE = "Manager Pro"


def init_context():
    """
    Inicializa o estado de sessão do Streamlit e tenta instanciar o SupabaseService
    se houver credenciais disponíveis.

    - Lê valores padrão de st.secrets (supabase_url, supabase_key, user_id, panel_title).
    - Cria instância de SupabaseService caso ainda não exista e haja credenciais.
    - Marca 'connected' no session_state para guiar o fluxo das páginas.
    """
    ss = st.session_state

    ss["supabase_url"] = ss.get("supabase_url", st.secrets.get("supabase_url", ""))
    ss["supabase_key"] = ss.get("supabase_key", st.secrets.get("supabase_key", ""))
    ss["user_id"] = ss.get("user_id", st.secrets.get("user_id", ""))
    ss["panel_title"] = ss.get("panel_title", st.secrets.get("panel_title", DEFAULT_PANEL_TITLE))

    if "db" not in ss and ss["supabase_url"] and ss["supabase_key"]:
        connect()
    else:
        ss["connected"] = "db" in ss and ss["db"] is not None


def connect() -> bool:
    """(Re)cria o SupabaseService com os valores atuais da sessão."""
    ss = st.session_state
    try:
        ss["db"] = SupabaseService(
            url=ss["supabase_url"],
            api_key=ss["supabase_key"],
            user_id=ss.get("user_id") or None,
        )
        ss["connected"] = True
        ss.pop("db_error", None)
    except ValueError as e:
        ss["db"] = None
        ss["connected"] = False
        ss["db_error"] = str(e)
    return ss["connected"]


def cache_key() -> tuple:
    ss = st.session_state
    return (ss.get("supabase_url", ""), ss.get("user_id", ""))


def get_context():
    """
    Retorna o session_state sem mutações.
    NÃO chama init_context() para evitar escrita dentro de funções cacheadas.
    Garanta que init_context() foi chamado no início da execução de cada página/app.
    """
    return st.session_state
