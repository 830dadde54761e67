# pages/6_Comprovantes.py
import streamlit as st
import pandas as pd

from services.app_context import init_context, get_context
from services.comprovantes import build_receipt, receipt_text
from services.data_loader import load_or_stop, get_stores
from services.datas import fmt_date_br, get_today
from services.errors import PersistenceError
from services.ui import section, responsive_columns, require_connection
from services.utils import fmt_brl, clear_cache_and_rerun

st.set_page_config(page_title="Comprovantes", page_icon="🧾", layout="centered")
st.title("🧾 Comprovantes de Renovação")

init_context()
ctx = get_context()
require_connection(ctx)

store = get_stores(ctx["db"])["receipts"]
data = load_or_stop()

# chave única: tipo + id (clientes e revendedores podem repetir ids)
opcoes = {f"client-{c['id']}": ("client", c) for c in data["clients"]}
opcoes.update({f"reseller-{r['id']}": ("reseller", r) for r in data["resellers"]})

alvo = st.session_state.pop("receipt_target", None)
chaves = list(opcoes)
padrao = f"{alvo['kind']}-{alvo['id']}" if alvo else None

section("🧑 Selecionar")
escolha = st.selectbox(
    "Cliente / revendedor", chaves,
    index=chaves.index(padrao) if padrao in chaves else 0,
    format_func=lambda k: f"{opcoes[k][1].get('name')} ({'Revendedor' if opcoes[k][0] == 'reseller' else 'Cliente'})",
) if chaves else None

if not escolha:
    st.info("Nenhum cliente cadastrado.")
    st.stop()

tipo, pessoa = opcoes[escolha]
cols = responsive_columns(desktop=2)
forma = cols[0].selectbox("Forma de pagamento", ["PIX", "Dinheiro", "Cartão", "Transferência"])
data_pagto = cols[1].date_input("Data do pagamento", value=get_today(), format="DD/MM/YYYY")
recibo = build_receipt(pessoa, tipo, data["plans"], payment_method=forma, receipt_date=data_pagto)
recibo["text"] = receipt_text(recibo, ctx.get("panel_title", ""))

st.code(recibo["text"], language=None)

cols = responsive_columns(desktop=2)
if cols[0].button("💾 Salvar no histórico", use_container_width=True):
    try:
        store.create(recibo)
    except PersistenceError as e:
        st.error(f"Não foi possível salvar o comprovante no banco de dados. {e}")
    else:
        st.success("🧾 Comprovante salvo!")
        clear_cache_and_rerun()
cols[1].download_button(
    "⬇️ Baixar .txt", data=recibo["text"].encode("utf-8"),
    file_name=f"comprovante-{pessoa.get('name', 'cliente')}.txt", mime="text/plain",
    use_container_width=True,
)

st.divider()
section("📜 Histórico")
historico = [r for r in data["receipts"] if r.get("clientId") == pessoa.get("id") and r.get("clientType") == tipo]
if not historico:
    st.info("Sem comprovantes para este cadastro.")
else:
    st.dataframe(pd.DataFrame([{
        "Data": r.get("date"),
        "Plano": r.get("plan") or "—",
        "Valor": fmt_brl(r.get("amount")),
        "Vencimento": fmt_date_br(r.get("expiryDate")),
        "Pagamento": r.get("paymentMethod") or "—",
    } for r in historico]), use_container_width=True, hide_index=True)
