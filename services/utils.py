# services/utils.py
import re
import streamlit as st
from typing import Any


# ---------------------------------------------------------
# Formatação de moeda (BRL) robusta
# ---------------------------------------------------------
def fmt_brl(v: Any) -> str:
    """
    Formata valores em BRL com sinal correto e tolerância a erros.
    - Aceita int, float, str numérica (inclusive com vírgula decimal); fallback para 0.0.
    - Negativos exibem prefixo '-'.
    - Usa separadores padrão brasileiro (ponto para milhar, vírgula para decimal).
    """
    val = parse_price(v)
    abs_val = abs(val)
    s = f"{abs_val:,.2f}"
    s = s.replace(",", "X").replace(".", ",").replace("X", ".")
    prefix = "-" if val < 0 else ""
    return f"{prefix}R$ {s}"


def parse_price(v: Any) -> float:
    """'35,90' / '35.90' / 35.9 -> 35.9; inválido -> 0.0"""
    if isinstance(v, str):
        v = v.strip().replace("R$", "").strip().replace(",", ".")
    try:
        return float(v)
    except (ValueError, TypeError):
        return 0.0


def only_digits(phone: Any) -> str:
    return re.sub(r"\D", "", str(phone or ""))


# ---------------------------------------------------------
# Chaves únicas para widgets Streamlit
# ---------------------------------------------------------
def key_for(*parts: Any) -> str:
    """
    Gera chaves únicas e estáveis para widgets do Streamlit.
    - Concatena partes não nulas com '-'.
    """
    return "-".join(str(p) for p in parts if p is not None)


def clear_cache_and_rerun() -> None:
    """
    Limpa o cache de dados (`st.cache_data`) e reroda a aplicação.
    Útil após gravações no Supabase.
    """
    st.cache_data.clear()
    st.rerun()
