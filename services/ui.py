# services/ui.py
import streamlit as st


def is_mobile() -> bool:
    """
    Modo mobile controlado explicitamente pelo usuário.
    """
    return st.session_state.get("modo_mobile", False)


def responsive_columns(desktop: int, mobile: int = 1):
    cols = mobile if is_mobile() else desktop
    return st.columns(cols)


def section(title: str, caption: str | None = None):
    st.subheader(title)
    if caption:
        st.caption(caption)


def card(title: str, lines: list[str]):
    with st.container(border=True):
        st.markdown(f"**{title}**")
        for l in lines:
            st.write(l)


def metric_row(items: list, desktop_cols: int = 4):
    """items: (rótulo, valor) ou (rótulo, valor, ajuda)."""
    cols = responsive_columns(desktop=desktop_cols)
    n = len(cols)
    for i, it in enumerate(items):
        col = cols[i % n]
        if len(it) == 3:
            col.metric(it[0], it[1], help=it[2])
        else:
            col.metric(it[0], it[1])


def responsive_dataframe(df):
    """
    Tabela no desktop → cartões no mobile
    """
    if is_mobile():
        for row in df.to_dict(orient="records"):
            with st.container(border=True):
                for k, v in row.items():
                    st.write(f"**{k}:** {v}")
    else:
        st.dataframe(df, use_container_width=True)


def require_connection(ctx):
    if not ctx.get("connected"):
        st.warning("Conecte ao Supabase na página principal.")
        st.stop()
