# services/subscriber_page.py
"""
Tela compartilhada de clientes e revendedores: abas por status/vencimento,
busca, cadastro, edição, renovação e exclusão.
"""

from datetime import time

import pandas as pd
import streamlit as st

from services.app_context import init_context, get_context
from services.data_loader import load_or_stop, get_stores, run_scheduled_sweep
from services.datas import get_today, normalize_date, fmt_date_br, to_iso
from services.errors import PlanNotFoundError, PersistenceError
from services.renovacao import renew_and_save
from services.status import STATUS, status_badge
from services.ui import section, card, responsive_columns, is_mobile, require_connection
from services.utils import key_for, clear_cache_and_rerun
from services.vencimento import (
    VIEWS, VIEW_LABELS, EXPIRY_PRESETS, filter_subscribers, count_by_view,
    apply_expiry_preset, subscriber_days, app_expiry_days,
)

KINDS = {
    "clients": ("Clientes", "cliente"),
    "resellers": ("Revendedores", "revendedor"),
}


def _credentials_fields(prefix: str, creds: list) -> list:
    n = st.number_input("Credenciais", min_value=1, max_value=10, value=max(len(creds), 1), key=f"{prefix}-ncred")
    out = []
    for i in range(int(n)):
        base = creds[i] if i < len(creds) else {}
        cols = responsive_columns(desktop=4)
        login = cols[0].text_input("Login", value=base.get("login", ""), key=f"{prefix}-login-{i}")
        senha = cols[1].text_input("Senha", value=base.get("password", ""), key=f"{prefix}-senha-{i}")
        app = cols[2].text_input("App", value=base.get("appUsed", ""), key=f"{prefix}-app-{i}")
        venc = cols[3].date_input(
            "Vencimento do app",
            value=normalize_date(base.get("appExpiryDate")),
            key=f"{prefix}-appvenc-{i}",
            format="DD/MM/YYYY",
        )
        out.append({"login": login, "password": senha, "appUsed": app, "appExpiryDate": to_iso(venc) or ""})
    return out


def _form_fields(kind: str, prefix: str, plans: list, base: dict, allow_presets: bool) -> dict:
    plan_names = [p["name"] for p in plans]
    status_opts = list(STATUS) + (list(EXPIRY_PRESETS) if allow_presets else [])

    cols = responsive_columns(desktop=3)
    nome = cols[0].text_input("Nome", value=base.get("name", ""), key=f"{prefix}-nome")
    fone = cols[1].text_input("Telefone", value=base.get("phone", ""), key=f"{prefix}-fone")
    plano = cols[2].selectbox(
        "Plano", ["—"] + plan_names,
        index=(plan_names.index(base["plan"]) + 1) if base.get("plan") in plan_names else 0,
        key=f"{prefix}-plano",
    )

    cols = responsive_columns(desktop=3)
    status = cols[0].selectbox(
        "Status", status_opts,
        index=status_opts.index(base.get("status")) if base.get("status") in status_opts else 0,
        format_func=lambda s: VIEW_LABELS.get(s, s) if s in EXPIRY_PRESETS else status_badge(s),
        key=f"{prefix}-status",
    )
    venc = cols[1].date_input(
        "Vencimento", value=normalize_date(base.get("expiryDate")), key=f"{prefix}-venc", format="DD/MM/YYYY",
    )
    hora = cols[2].time_input("Horário", value=_parse_time(base.get("expiryTime")), key=f"{prefix}-hora")

    item = {
        "name": (nome or "").strip(),
        "phone": (fone or "").strip(),
        "plan": None if plano == "—" else plano,
        "status": status,
        "expiryDate": to_iso(venc) or "",
        "expiryTime": hora.strftime("%H:%M") if hora else "",
    }

    if kind == "clients":
        cols = responsive_columns(desktop=2)
        item["screens"] = cols[0].number_input("Telas", min_value=1, value=int(base.get("screens") or 1), key=f"{prefix}-telas")
        item["servers"] = cols[1].number_input("Servidores", min_value=1, value=int(base.get("servers") or 1), key=f"{prefix}-serv")
        item["credentials"] = _credentials_fields(prefix, base.get("credentials") or [])
    else:
        cols = responsive_columns(desktop=3)
        item["credits"] = cols[0].number_input("Créditos", min_value=0, value=int(base.get("credits") or 0), key=f"{prefix}-cred")
        item["login"] = cols[1].text_input("Login", value=base.get("login", ""), key=f"{prefix}-login")
        item["password"] = cols[2].text_input("Senha", value=base.get("password", ""), key=f"{prefix}-senha")

    item["extraInfo"] = st.text_area("Informações extras", value=base.get("extraInfo", ""), key=f"{prefix}-extra")
    return item


def _parse_time(value):
    try:
        h, m = str(value).split(":")[:2]
        return time(int(h), int(m))
    except (ValueError, TypeError):
        return None


def _renew(store, item: dict, plans: list):
    try:
        result = renew_and_save(store, item, plans)
    except PlanNotFoundError as e:
        st.error(f"❌ Erro de Renovação: {e}")
        return
    except PersistenceError as e:
        novo = fmt_date_br(e.result.new_expiry) if e.result else "—"
        st.error(f"❌ Não foi possível salvar a renovação no banco de dados (vencimento calculado: {novo}).")
        return
    st.success(f"🎉 {item.get('name')} foi renovado. Novo vencimento: {fmt_date_br(result.new_expiry)}.")
    clear_cache_and_rerun()


def _summary_lines(kind: str, item: dict, hoje) -> list:
    dias = subscriber_days(item, hoje)
    lines = [
        f"Status: {status_badge(item.get('status'))}",
        f"Telefone: {item.get('phone') or '—'}",
        f"Plano: {item.get('plan') or '—'}",
        f"Vencimento: {fmt_date_br(item.get('expiryDate'))} {item.get('expiryTime') or ''}"
        + (f" ({dias} dias)" if dias is not None else ""),
    ]
    if kind == "clients":
        app_dias = app_expiry_days(item, hoje)
        if app_dias is not None:
            lines.append(f"App vence em: {app_dias} dias")
    else:
        lines.append(f"Créditos: {item.get('credits', 0)}")
    return lines


def render_subscriber_page(kind: str):
    title, singular = KINDS[kind]
    st.set_page_config(page_title=title, page_icon="👥", layout="wide")
    st.title(f"👥 {title}")

    init_context()
    ctx = get_context()
    require_connection(ctx)

    for r in run_scheduled_sweep(ctx):
        for item_id, erro in r.failures.items():
            st.toast(f"⚠️ Falha ao atualizar {r.collection} {item_id or ''}: {erro}")

    store = get_stores(ctx["db"])[kind]
    data = load_or_stop()
    itens = data[kind]
    plans = data["plans"]
    hoje = get_today()

    # ---------------- Cadastro ----------------
    with st.expander(f"➕ Novo {singular}", expanded=False):
        with st.form(f"novo-{kind}"):
            novo = _form_fields(kind, f"novo-{kind}", plans, {}, allow_presets=True)
            salvar = st.form_submit_button("Salvar")
        if salvar:
            if not novo["name"] or not novo["phone"]:
                st.error("Nome e telefone são obrigatórios!")
            else:
                try:
                    store.create(apply_expiry_preset(novo, hoje))
                except PersistenceError as e:
                    st.error(str(e))
                else:
                    st.success(f"{novo['name']} cadastrado.")
                    clear_cache_and_rerun()

    # ---------------- Abas / busca ----------------
    views = VIEWS if kind == "clients" else tuple(v for v in VIEWS if not v.startswith("app_"))
    counts = count_by_view(itens, hoje)

    cols = responsive_columns(desktop=2)
    view = cols[0].selectbox("Visualizar", views, format_func=lambda v: f"{VIEW_LABELS[v]} ({counts[v]})")
    busca = cols[1].text_input("Buscar por nome ou telefone")

    filtrados = filter_subscribers(itens, view, busca, hoje)
    section(f"📚 {VIEW_LABELS[view]}", f"{len(filtrados)} registro(s)")

    if not filtrados:
        st.info("Nenhum registro encontrado.")
        return

    if not is_mobile():
        df = pd.DataFrame([{
            "Nome": x.get("name"),
            "Telefone": x.get("phone"),
            "Plano": x.get("plan") or "—",
            "Vencimento": fmt_date_br(x.get("expiryDate")),
            "Status": status_badge(x.get("status")),
        } for x in filtrados])
        st.dataframe(df, use_container_width=True, hide_index=True)
        st.download_button(
            "📤 Exportar CSV", data=df.to_csv(index=False).encode("utf-8"),
            file_name=f"{kind}.csv", mime="text/csv",
        )
        st.divider()

    for x in filtrados:
        xid = x.get("id")
        card(x.get("name") or "—", _summary_lines(kind, x, hoje))
        cols = responsive_columns(desktop=4)

        if cols[0].button("🔄 Renovar", key=key_for("renovar", kind, xid)):
            _renew(store, x, plans)

        if cols[1].button("🧾 Comprovante", key=key_for("recibo", kind, xid)):
            st.session_state["receipt_target"] = {"kind": kind[:-1], "id": xid}
            st.switch_page("pages/6_Comprovantes.py")

        if cols[2].button("🗑️ Excluir", key=key_for("del", kind, xid)):
            try:
                store.delete(xid)
            except PersistenceError as e:
                st.error(str(e))
            else:
                clear_cache_and_rerun()

        with st.expander("✏️ Editar"):
            with st.form(key_for("edit", kind, xid)):
                editado = _form_fields(kind, key_for("ed", kind, xid), plans, x, allow_presets=False)
                ok = st.form_submit_button("💾 Salvar")
            if ok:
                mudou = {k: v for k, v in editado.items() if x.get(k) != v}
                if not mudou:
                    st.info("Nenhuma alteração detectada.")
                else:
                    try:
                        store.update(xid, mudou)
                    except PersistenceError as e:
                        st.error(str(e))
                    else:
                        st.success("Alterações salvas.")
                        clear_cache_and_rerun()
