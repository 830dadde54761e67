# pages/7_Relatorios.py
import streamlit as st

from services.app_context import init_context, get_context
from services.data_loader import load_or_stop
from services.relatorios import revenue_by_plan, receipts_by_month
from services.ui import section, metric_row, responsive_dataframe, is_mobile, require_connection
from services.utils import fmt_brl

st.set_page_config(page_title="Relatórios", page_icon="📈", layout="wide")
st.title("📈 Relatórios")

init_context()
ctx = get_context()
require_connection(ctx)

data = load_or_stop()
por_plano = revenue_by_plan(data["clients"], data["plans"])
por_mes = receipts_by_month(data["receipts"])

metric_row([
    ("Receita mensal (ativos)", fmt_brl(por_plano["Receita"].sum() if not por_plano.empty else 0)),
    ("Clientes cadastrados", len(data["clients"])),
    ("Comprovantes emitidos", len(data["receipts"])),
], desktop_cols=3)

st.divider()
section("📦 Receita por plano", "Soma do preço do plano para cada cliente ativo")
if por_plano.empty:
    st.info("Nenhum plano cadastrado.")
else:
    tabela = por_plano.copy()
    tabela["Receita"] = tabela["Receita"].map(fmt_brl)
    responsive_dataframe(tabela)
    st.bar_chart(por_plano.set_index("Plano")["Receita"], height=240 if is_mobile() else 380)

st.divider()
section("🧾 Faturamento por mês", "Com base nos comprovantes salvos")
if por_mes.empty:
    st.info("Sem comprovantes.")
else:
    st.bar_chart(por_mes, height=240 if is_mobile() else 380)
