# services/mensagens.py
import re
from datetime import date
from typing import Optional
from urllib.parse import quote

from services.datas import normalize_date, get_today, fmt_date_br
from services.vencimento import days_until_expiry

PLACEHOLDERS = (
    "{nome}", "{login}", "{senha}", "{app}", "{plano}",
    "{valor_plano}", "{data_vencimento}", "{dias}", "{dados_pix}",
)


def pix_details(pix: Optional[dict]) -> str:
    """Bloco com os dados PIX anexado às mensagens. Vazio sem chave."""
    if not pix or not pix.get("key"):
        return ""
    lines = [
        "--- DADOS PIX ---",
        f"Nome: {pix.get('name', '')}",
        f"Chave: {pix.get('key', '')}",
        f"Banco: {pix.get('bank', '')}",
        "-----------------",
    ]
    if pix.get("message"):
        lines.append(pix["message"])
    return "\n".join(lines)


def _is_reseller(sub: dict) -> bool:
    return "credits" in sub or ("login" in sub and not sub.get("credentials"))


def format_message(
    template: dict,
    sub: dict,
    plans: list,
    pix: Optional[dict] = None,
    panel_title: str = "",
    today: Optional[date] = None,
) -> str:
    """
    Substitui os marcadores do template com os dados do cliente/revendedor.
    Revendedores usam login/senha próprios; clientes usam a primeira credencial.
    """
    if not template or not sub:
        return ""
    today = today or get_today()

    if _is_reseller(sub):
        login, senha, app = sub.get("login") or "", sub.get("password") or "", ""
    else:
        creds = sub.get("credentials") or [{}]
        first = creds[0] if isinstance(creds[0], dict) else {}
        login, senha, app = first.get("login") or "", first.get("password") or "", first.get("appUsed") or ""

    plan = next((p for p in plans or [] if p.get("name") == sub.get("plan")), None)
    expiry = normalize_date(sub.get("expiryDate"))
    dias = days_until_expiry(expiry, today) if expiry else 0

    values = {
        "{nome}": sub.get("name") or "",
        "{login}": login,
        "{senha}": senha,
        "{app}": app,
        "{plano}": sub.get("plan") or "",
        "{valor_plano}": str(plan.get("price")) if plan else "N/A",
        "{data_vencimento}": fmt_date_br(expiry) if expiry else "",
        "{dias}": str(max(dias, 0)),
        "{dados_pix}": pix_details(pix),
    }

    message = template.get("message") or ""
    message = re.sub("|".join(re.escape(k) for k in PLACEHOLDERS), lambda m: values[m.group(0)], message)
    return f"*{panel_title}*\n\n{message}" if panel_title else message


def whatsapp_url(phone: str, text: str) -> str:
    digits = re.sub(r"\D", "", phone or "")
    return f"https://api.whatsapp.com/send?phone={digits}&text={quote(text)}"
