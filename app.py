# app.py
import sys
from pathlib import Path

import streamlit as st

# -------------------------------------------------
# Ajuste de path
# -------------------------------------------------
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# -------------------------------------------------
# Imports internos
# -------------------------------------------------
from services.app_context import get_context, init_context, connect
from services.data_loader import load_or_stop, run_scheduled_sweep
from services.datas import get_today, fmt_date_br
from services.notificacoes import NotifiedStore, check_expiring_30_days
from services.relatorios import dashboard_stats, upcoming_expirations
from services.ui import section, metric_row, responsive_dataframe


# -------------------------------------------------
# Configuração da página
# -------------------------------------------------
st.set_page_config(
    page_title="Painel IPTV",
    page_icon="📺",
    layout="wide",
)

init_context()
ctx = get_context()

st.title(f"📺 {ctx.get('panel_title')}")
st.caption("Clientes, revendedores, planos e vencimentos")

# -------------------------------------------------
# Sidebar (conexão)
# -------------------------------------------------
with st.sidebar:
    st.subheader("📱 Interface")
    st.toggle("Modo mobile", key="modo_mobile")

    st.divider()
    st.subheader("🔧 Conexão")

    st.text_input("URL do Supabase", key="supabase_url")
    st.text_input("Chave (service key)", key="supabase_key", type="password")
    st.text_input("User ID (opcional)", key="user_id")

    if st.button("Conectar", use_container_width=True):
        if connect():
            st.cache_data.clear()
            st.session_state.pop("last_sweep", None)
            st.success("✅ Conectado ao Supabase")
            st.rerun()
        else:
            st.error(ctx.get("db_error", "Falha ao conectar."))

    if not ctx.get("connected"):
        st.warning("Conecte ao Supabase para continuar.")
        st.stop()

# -------------------------------------------------
# Varredura de status (início da sessão + a cada hora)
# -------------------------------------------------
for r in run_scheduled_sweep(ctx):
    for item_id, erro in r.failures.items():
        st.toast(f"⚠️ Falha ao atualizar {r.collection} {item_id or ''}: {erro}")

# -------------------------------------------------
# Carregamento
# -------------------------------------------------
data = load_or_stop()

clients = data["clients"]
resellers = data["resellers"]
hoje = get_today()

# -------------------------------------------------
# Avisos de 30 dias (uma vez por cliente por dia)
# -------------------------------------------------
for aviso in check_expiring_30_days(clients, NotifiedStore(st.session_state), hoje):
    st.toast(f"{aviso.title}: {aviso.message}")

# -------------------------------------------------
# KPIs
# -------------------------------------------------
stats = dashboard_stats(clients, resellers, hoje)

section("📊 Visão geral", f"Hoje: {fmt_date_br(hoje)}")
metric_row([
    ("Clientes ativos", stats["active_clients"]),
    ("Clientes vencendo hoje", stats["clients_expiring_today"]),
    ("Revendedores ativos", stats["active_resellers"]),
    ("Revendedores vencendo hoje", stats["resellers_expiring_today"]),
])

st.divider()

# -------------------------------------------------
# Próximos vencimentos
# -------------------------------------------------
section("⏳ Vencem nos próximos 5 dias")
prox = upcoming_expirations(clients + resellers, hoje)
if prox.empty:
    st.info("Nenhum vencimento nos próximos 5 dias.")
else:
    prox["Vencimento"] = prox["Vencimento"].map(fmt_date_br)
    responsive_dataframe(prox)

# -------------------------------------------------
# 🔍 Diagnóstico
# -------------------------------------------------
with st.expander("🔍 Última varredura de status", expanded=False):
    last = ctx.get("last_sweep")
    st.write("Executada em:", last.strftime("%d/%m/%Y %H:%M") if last else "—")
    if st.button("Executar agora"):
        ctx.pop("last_sweep", None)
        st.rerun()
