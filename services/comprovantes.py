# services/comprovantes.py
from datetime import date
from typing import Optional

from services.datas import get_today, fmt_date_br
from services.utils import fmt_brl


def build_receipt(
    sub: dict,
    kind: str,
    plans: list,
    today: Optional[date] = None,
    payment_method: str = "",
    receipt_date: Optional[date] = None,
) -> dict:
    """
    Monta o comprovante de renovação de um cliente ('client') ou revendedor ('reseller').
    Valor vem do plano; sem plano cadastrado fica '0'.
    A data do comprovante é `receipt_date` (escolhida pelo operador) ou hoje.
    """
    if kind not in ("client", "reseller"):
        raise ValueError(f"Tipo de comprovante inválido: {kind}")
    paid_on = receipt_date or today or get_today()
    plan = next((p for p in plans or [] if p.get("name") == sub.get("plan")), None)
    return {
        "clientId": sub.get("id"),
        "clientName": sub.get("name") or "",
        "clientType": kind,
        "plan": sub.get("plan"),
        "amount": (plan.get("price") or "0") if plan else "0",
        "date": paid_on.strftime("%d/%m/%Y"),
        "expiryDate": sub.get("expiryDate") or "",
        "paymentMethod": payment_method,
    }


def receipt_text(receipt: dict, panel_title: str = "") -> str:
    """Corpo do comprovante em texto (para copiar/enviar)."""
    lines = []
    if panel_title:
        lines += [f"*{panel_title}*", ""]
    lines += [
        "🧾 COMPROVANTE DE RENOVAÇÃO",
        f"Cliente: {receipt.get('clientName', '')}",
        f"Plano: {receipt.get('plan') or '—'}",
        f"Valor: {fmt_brl(receipt.get('amount'))}",
        f"Data do pagamento: {receipt.get('date') or '—'}",
        f"Próximo vencimento: {fmt_date_br(receipt.get('expiryDate'))}",
    ]
    if receipt.get("paymentMethod"):
        lines.append(f"Forma de pagamento: {receipt['paymentMethod']}")
    return "\n".join(lines)
