# pages/3_Planos.py
import streamlit as st

from services.app_context import init_context, get_context
from services.data_loader import load_or_stop, get_stores
from services.errors import PersistenceError
from services.renovacao import plan_duration_days, months_for_duration
from services.ui import section, card, responsive_columns, require_connection
from services.utils import fmt_brl, key_for, clear_cache_and_rerun

st.set_page_config(page_title="Planos", page_icon="📦", layout="centered")
st.title("📦 Planos")

init_context()
ctx = get_context()
require_connection(ctx)

store = get_stores(ctx["db"])["plans"]
data = load_or_stop()
planos = data["plans"]
clientes = data["clients"]


def plan_form(prefix: str, base: dict) -> dict:
    cols = responsive_columns(desktop=3)
    nome = cols[0].text_input("Nome", value=base.get("name", ""), key=f"{prefix}-nome")
    preco = cols[1].text_input("Preço (R$)", value=base.get("price", ""), key=f"{prefix}-preco")
    duracao = cols[2].number_input(
        "Duração (dias)", min_value=1, step=30,
        value=plan_duration_days(base) if base else 30, key=f"{prefix}-dur",
    )
    cols = responsive_columns(desktop=3)
    telas = cols[0].text_input("Máx. dispositivos", value=base.get("maxDevices", ""), key=f"{prefix}-disp")
    qualidade = cols[1].text_input("Qualidade", value=base.get("quality", ""), key=f"{prefix}-qual")
    canais = cols[2].text_input("Canais", value=base.get("channels", ""), key=f"{prefix}-canais")
    descricao = st.text_area("Descrição", value=base.get("description", ""), key=f"{prefix}-desc")

    if int(duracao) % 30:
        st.caption(
            f"⚠️ Renovações avançam meses inteiros: {int(duracao)} dias renovam "
            f"{months_for_duration(int(duracao))} mês(es)."
        )
    return {
        "name": (nome or "").strip(),
        "price": preco,
        "duration": int(duracao),
        "maxDevices": telas,
        "quality": qualidade,
        "channels": canais,
        "description": descricao,
    }


# --------------------------------------------------
# ➕ Novo plano
# --------------------------------------------------
section("➕ Novo plano")
with st.form("novo_plano"):
    novo = plan_form("novo", {})
    salvar = st.form_submit_button("Salvar")

if salvar:
    if not novo["name"]:
        st.error("Informe o nome do plano.")
    elif any(p["name"] == novo["name"] for p in planos):
        st.error("Já existe um plano com esse nome.")
    else:
        try:
            store.create(novo)
        except PersistenceError as e:
            st.error(str(e))
        else:
            st.success(f"Plano '{novo['name']}' criado.")
            clear_cache_and_rerun()

st.divider()

# --------------------------------------------------
# 📚 Planos cadastrados
# --------------------------------------------------
section("📚 Planos cadastrados")
if not planos:
    st.info("Nenhum plano cadastrado.")

for p in planos:
    pid = p.get("id")
    em_uso = sum(1 for c in clientes if c.get("plan") == p.get("name"))
    card(p.get("name") or "—", [
        f"Preço: {fmt_brl(p.get('price'))}",
        f"Duração: {plan_duration_days(p)} dias",
        f"Clientes no plano: {em_uso}",
    ])

    with st.expander("✏️ Editar"):
        with st.form(key_for("plano", pid)):
            editado = plan_form(key_for("ed", pid), p)
            ok = st.form_submit_button("💾 Salvar")
        if ok:
            try:
                store.update(pid, editado)
            except PersistenceError as e:
                st.error(str(e))
            else:
                if editado["name"] != p.get("name") and em_uso:
                    # clientes guardam o nome do plano; renovações deles vão falhar até serem editados
                    st.cache_data.clear()
                    st.warning(f"{em_uso} cliente(s) ainda referenciam o nome antigo '{p.get('name')}'.")
                else:
                    clear_cache_and_rerun()

    if st.button("🗑️ Excluir", key=key_for("del-plano", pid)):
        try:
            store.delete(pid)
        except PersistenceError as e:
            st.error(str(e))
        else:
            clear_cache_and_rerun()
