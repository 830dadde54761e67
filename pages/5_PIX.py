# pages/5_PIX.py
import streamlit as st

from services.app_context import init_context, get_context
from services.data_loader import load_or_stop, get_stores
from services.errors import PersistenceError
from services.mensagens import pix_details
from services.ui import section, card, responsive_columns, require_connection
from services.utils import key_for, clear_cache_and_rerun

PIX_TYPES = {"cpf": "CPF", "cnpj": "CNPJ", "email": "E-mail", "phone": "Telefone", "random": "Aleatória"}

st.set_page_config(page_title="PIX", page_icon="💠", layout="centered")
st.title("💠 Configurações PIX")

init_context()
ctx = get_context()
require_connection(ctx)

store = get_stores(ctx["db"])["pix_configs"]
pixs = load_or_stop()["pix_configs"]

section("➕ Nova chave PIX")
with st.form("novo_pix"):
    cols = responsive_columns(desktop=2)
    rotulo = cols[0].text_input("Rótulo")
    tipo = cols[1].selectbox("Tipo", list(PIX_TYPES), format_func=PIX_TYPES.get, index=4)
    cols = responsive_columns(desktop=3)
    nome = cols[0].text_input("Titular")
    chave = cols[1].text_input("Chave")
    banco = cols[2].text_input("Banco")
    msg = st.text_area("Mensagem adicional")
    salvar = st.form_submit_button("Salvar")

if salvar:
    if not (chave or "").strip():
        st.error("Informe a chave PIX.")
    else:
        try:
            store.create({
                "label": rotulo, "type": tipo, "name": nome,
                "key": chave.strip(), "bank": banco, "message": msg,
            })
        except PersistenceError as e:
            st.error(str(e))
        else:
            clear_cache_and_rerun()

st.divider()
section("📚 Chaves salvas")
if not pixs:
    st.info("Nenhuma chave cadastrada.")

for p in pixs:
    card(f"{p.get('label')} ({PIX_TYPES.get(p.get('type'), p.get('type'))})", pix_details(p).splitlines())
    if st.button("🗑️ Excluir", key=key_for("del-pix", p.get("id"))):
        try:
            store.delete(p.get("id"))
        except PersistenceError as e:
            st.error(str(e))
        else:
            clear_cache_and_rerun()
