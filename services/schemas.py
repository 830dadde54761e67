# services/schemas.py
"""
Conversão entre as linhas do Supabase (snake_case) e os dicts usados no app
(camelCase).

Os `*_to_db` aceitam `partial=True` para updates: só as chaves presentes no
dict de origem são enviadas, assim um update de status não apaga nome,
telefone etc.
"""

from datetime import datetime
from typing import Any, Optional

from services.datas import normalize_date, to_iso, get_today, parse_date_br


def _num(v: Any, default: float = 0.0) -> float:
    try:
        return float(str(v).replace(",", "."))
    except (TypeError, ValueError):
        return default


def _date_or_none(v: Any) -> Optional[str]:
    return to_iso(normalize_date(v))


def _pick(obj: dict, mapping: dict, partial: bool) -> dict:
    """mapping: chave_app -> (coluna_db, conversor, default)."""
    out = {}
    for key, (col, conv, default) in mapping.items():
        if partial and key not in obj:
            continue
        val = obj.get(key)
        out[col] = conv(val) if val not in (None, "") else default
    return out


def normalize_credentials(creds: Any) -> list:
    if not isinstance(creds, list):
        return []
    out = []
    for c in creds:
        if not isinstance(c, dict):
            continue
        out.append({
            "login": c.get("login") or "",
            "password": c.get("password") or "",
            "appUsed": c.get("appUsed") or "",
            "appExpiryDate": c.get("appExpiryDate") or "",
        })
    return out


# ---------------------------------------------------------
# Clientes
# ---------------------------------------------------------
_CLIENT_FIELDS = {
    "name": ("name", str, ""),
    "phone": ("phone", str, ""),
    "plan": ("plan", str, None),
    "screens": ("screens", int, 1),
    "servers": ("servers", int, 1),
    "expiryDate": ("expiry_date", _date_or_none, None),
    "expiryTime": ("expiry_time", str, None),
    "credentials": ("credentials", normalize_credentials, []),
    "extraInfo": ("extra_info", str, None),
    "status": ("status", str, "active"),
}


def map_client_from_db(row: Optional[dict]) -> Optional[dict]:
    if not row:
        return None
    return {
        "id": row.get("id"),
        "name": row.get("name") or "",
        "phone": row.get("phone") or "",
        "plan": row.get("plan"),
        "screens": row.get("screens") or 1,
        "servers": row.get("servers") or 1,
        "createdAt": row.get("created_at") or datetime.now().isoformat(),
        "expiryDate": row.get("expiry_date") or "",
        "expiryTime": row.get("expiry_time") or "",
        "credentials": normalize_credentials(row.get("credentials")),
        "extraInfo": row.get("extra_info") or "",
        "status": row.get("status") or "active",
    }


def map_client_to_db(obj: dict, partial: bool = False) -> dict:
    return _pick(obj, _CLIENT_FIELDS, partial)


# ---------------------------------------------------------
# Revendedores
# ---------------------------------------------------------
_RESELLER_FIELDS = {
    "name": ("name", str, ""),
    "phone": ("phone", str, ""),
    "credits": ("credits", int, 0),
    "login": ("login", str, None),
    "password": ("password", str, None),
    "status": ("status", str, "active"),
    "plan": ("plan", str, None),
    "expiryDate": ("expiry_date", _date_or_none, None),
    "expiryTime": ("expiry_time", str, None),
    "extraInfo": ("extra_info", str, None),
}


def map_reseller_from_db(row: Optional[dict]) -> Optional[dict]:
    if not row:
        return None
    return {
        "id": row.get("id"),
        "name": row.get("name") or "",
        "phone": row.get("phone") or "",
        "credits": row.get("credits") or 0,
        "login": row.get("login") or "",
        "password": row.get("password") or "",
        "status": row.get("status") or "active",
        "plan": row.get("plan"),
        "createdAt": row.get("created_at") or datetime.now().isoformat(),
        "expiryDate": row.get("expiry_date") or "",
        "expiryTime": row.get("expiry_time") or "",
        "extraInfo": row.get("extra_info") or "",
    }


def map_reseller_to_db(obj: dict, partial: bool = False) -> dict:
    return _pick(obj, _RESELLER_FIELDS, partial)


# ---------------------------------------------------------
# Planos
# ---------------------------------------------------------
_PLAN_FIELDS = {
    "name": ("name", str, ""),
    "price": ("price", _num, 0.0),
    "duration": ("duration", lambda v: int(_num(v, 30)), 30),
    "description": ("description", str, None),
    "maxDevices": ("max_devices", str, None),
    "quality": ("quality", str, None),
    "channels": ("channels", str, None),
}


def map_plan_from_db(row: Optional[dict]) -> Optional[dict]:
    if not row:
        return None
    return {
        "id": row.get("id"),
        "name": row.get("name") or "",
        "price": str(row["price"]) if row.get("price") is not None else "",
        "duration": str(row["duration"]) if row.get("duration") else "",
        "description": row.get("description") or "",
        "maxDevices": row.get("max_devices") or "",
        "quality": row.get("quality") or "",
        "channels": row.get("channels") or "",
        "createdAt": row.get("created_at") or datetime.now().isoformat(),
    }


def map_plan_to_db(obj: dict, partial: bool = False) -> dict:
    return _pick(obj, _PLAN_FIELDS, partial)


# ---------------------------------------------------------
# Comprovantes
# ---------------------------------------------------------
def map_receipt_from_db(row: Optional[dict]) -> Optional[dict]:
    if not row:
        return None
    data = row.get("receipt_data") or {}
    paid = normalize_date(row.get("payment_date"))
    return {
        "id": row.get("id"),
        "clientId": row.get("client_id"),
        "clientName": row.get("client_name") or "",
        "clientType": row.get("client_type") or "client",
        "plan": row.get("plan"),
        "amount": str(row.get("amount") or 0),
        "date": paid.strftime("%d/%m/%Y") if paid else "",
        "expiryDate": row.get("expiry_date") or "",
        "paymentMethod": row.get("payment_method") or "",
        "text": data.get("text", "") if isinstance(data, dict) else "",
        "createdAt": row.get("created_at") or datetime.now().isoformat(),
    }


def map_receipt_to_db(obj: dict, partial: bool = False) -> dict:
    # data do comprovante vem em dd/mm/aaaa; sem data válida usa hoje
    payment = parse_date_br(obj.get("date")) or normalize_date(obj.get("date")) or get_today()
    out = {
        "client_id": obj.get("clientId"),
        "client_name": obj.get("clientName") or "",
        "client_type": obj.get("clientType") or "client",
        "plan": obj.get("plan") or None,
        "amount": _num(obj.get("amount"), 0.0),
        "payment_date": payment.isoformat(),
        "expiry_date": _date_or_none(obj.get("expiryDate")),
        "payment_method": obj.get("paymentMethod") or None,
        "receipt_data": {"text": obj.get("text", "")},
    }
    if partial:
        keys = {
            "clientId": "client_id", "clientName": "client_name", "clientType": "client_type",
            "plan": "plan", "amount": "amount", "date": "payment_date",
            "expiryDate": "expiry_date", "paymentMethod": "payment_method", "text": "receipt_data",
        }
        out = {col: out[col] for key, col in keys.items() if key in obj}
    return out


# ---------------------------------------------------------
# PIX
# ---------------------------------------------------------
_PIX_FIELDS = {
    "label": ("label", str, "PIX Salvo"),
    "name": ("name", str, ""),
    "key": ("pix_key", str, ""),
    "bank": ("bank", str, ""),
    "message": ("message", str, ""),
    "type": ("pix_type", str, "random"),
}


def map_pix_from_db(row: Optional[dict]) -> Optional[dict]:
    if not row:
        return None
    return {
        "id": row.get("id"),
        "label": row.get("label") or "Sem nome",
        "name": row.get("name") or "",
        "key": row.get("pix_key") or "",
        "bank": row.get("bank") or "",
        "message": row.get("message") or "",
        "type": row.get("pix_type") or "random",
        "createdAt": row.get("created_at") or datetime.now().isoformat(),
    }


def map_pix_to_db(obj: dict, partial: bool = False) -> dict:
    return _pick(obj, _PIX_FIELDS, partial)


# ---------------------------------------------------------
# Templates de mensagem (mesmo formato no banco e no app)
# ---------------------------------------------------------
_TEMPLATE_FIELDS = {
    "name": ("name", str, ""),
    "subject": ("subject", str, ""),
    "message": ("message", str, ""),
}


def map_template_from_db(row: Optional[dict]) -> Optional[dict]:
    if not row:
        return None
    return {
        "id": row.get("id"),
        "name": row.get("name") or "",
        "subject": row.get("subject") or "",
        "message": row.get("message") or "",
    }


def map_template_to_db(obj: dict, partial: bool = False) -> dict:
    return _pick(obj, _TEMPLATE_FIELDS, partial)


def map_many(rows: Any, mapper) -> list:
    if not isinstance(rows, list):
        return []
    return [x for x in (mapper(r) for r in rows if isinstance(r, dict)) if x is not None]
