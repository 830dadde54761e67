# pages/4_WhatsApp.py
import streamlit as st

from services.app_context import init_context, get_context
from services.data_loader import load_or_stop, get_stores
from services.errors import PersistenceError
from services.mensagens import PLACEHOLDERS, format_message, whatsapp_url
from services.ui import section, responsive_columns, require_connection
from services.utils import key_for, clear_cache_and_rerun
from services.vencimento import VIEWS, VIEW_LABELS, filter_subscribers

st.set_page_config(page_title="WhatsApp", page_icon="💬", layout="centered")
st.title("💬 Mensagens WhatsApp")

init_context()
ctx = get_context()
require_connection(ctx)

store = get_stores(ctx["db"])["message_templates"]
data = load_or_stop()
templates = data["message_templates"]
pixs = data["pix_configs"]

# --------------------------------------------------
# Templates
# --------------------------------------------------
section("📝 Templates", "Marcadores: " + " ".join(PLACEHOLDERS))

with st.form("novo_template"):
    cols = responsive_columns(desktop=2)
    nome = cols[0].text_input("Nome")
    assunto = cols[1].text_input("Assunto")
    corpo = st.text_area("Mensagem")
    criar = st.form_submit_button("Salvar template")

if criar:
    if not (nome or "").strip() or not (corpo or "").strip():
        st.error("Nome e mensagem são obrigatórios.")
    else:
        try:
            store.create({"name": nome.strip(), "subject": assunto, "message": corpo})
        except PersistenceError as e:
            st.error(str(e))
        else:
            clear_cache_and_rerun()

for t in templates:
    tid = t.get("id")
    with st.expander(f"✏️ {t.get('name')}"):
        novo_corpo = st.text_area("Mensagem", value=t.get("message", ""), key=key_for("tpl", tid))
        cols = st.columns(2)
        if cols[0].button("💾 Salvar", key=key_for("tpl-save", tid)):
            try:
                store.update(tid, {"message": novo_corpo})
            except PersistenceError as e:
                st.error(str(e))
            else:
                clear_cache_and_rerun()
        if cols[1].button("🗑️ Excluir", key=key_for("tpl-del", tid)):
            try:
                store.delete(tid)
            except PersistenceError as e:
                st.error(str(e))
            else:
                clear_cache_and_rerun()

st.divider()

# --------------------------------------------------
# Envio
# --------------------------------------------------
section("📤 Enviar")

publico = st.radio("Para", ["Clientes", "Revendedores"], horizontal=True)
base = data["clients"] if publico == "Clientes" else data["resellers"]
views = VIEWS if publico == "Clientes" else tuple(v for v in VIEWS if not v.startswith("app_"))
view = st.selectbox("Filtro", views, format_func=lambda v: VIEW_LABELS[v])
destinatarios = filter_subscribers(base, view)

if not templates:
    st.info("Cadastre um template para enviar mensagens.")
    st.stop()

tpl = st.selectbox("Template", templates, format_func=lambda t: t.get("name", ""))
pix = st.selectbox("Dados PIX", [None] + pixs, format_func=lambda p: p.get("label") if p else "Nenhum")

if not destinatarios:
    st.info("Nenhum destinatário para o filtro.")

for d in destinatarios:
    texto = format_message(tpl, d, data["plans"], pix, ctx.get("panel_title", ""))
    with st.container(border=True):
        st.markdown(f"**{d.get('name')}** — {d.get('phone') or 'sem telefone'}")
        st.code(texto, language=None)
        if d.get("phone"):
            st.link_button("Abrir no WhatsApp", whatsapp_url(d["phone"], texto))
