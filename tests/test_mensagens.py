from services.mensagens import format_message, pix_details, whatsapp_url

TEMPLATE = {"message": "Olá {nome}, login {login}/{senha} no {app}. Plano {plano} ({valor_plano}) vence {data_vencimento} em {dias} dias.\n{dados_pix}"}
PIX = {"name": "Loja", "key": "chave@pix", "bank": "Banco X"}


def test_client_message(plans, today):
    cliente = {
        "name": "Ana", "plan": "Mensal", "expiryDate": "2024-03-15",
        "credentials": [{"login": "ana1", "password": "123", "appUsed": "XCIPTV"}],
    }
    msg = format_message(TEMPLATE, cliente, plans, PIX, "Manager Pro", today)
    assert msg.startswith("*Manager Pro*\n\n")
    assert "Olá Ana, login ana1/123 no XCIPTV." in msg
    assert "Plano Mensal (35.00) vence 15/03/2024 em 5 dias." in msg
    assert "Chave: chave@pix" in msg


def test_reseller_message_uses_own_login(plans, today):
    rev = {"name": "Rev", "credits": 10, "login": "rev", "password": "pw", "plan": "X", "expiryDate": "2024-03-01"}
    msg = format_message(TEMPLATE, rev, plans, None, "", today)
    assert "login rev/pw no ." in msg
    assert "(N/A)" in msg
    assert "em 0 dias" in msg


def test_pix_details_empty_without_key():
    assert pix_details(None) == ""
    assert pix_details({"name": "x"}) == ""
    assert pix_details(PIX).splitlines()[0] == "--- DADOS PIX ---"


def test_whatsapp_url():
    assert whatsapp_url("(11) 99999-0000", "oi tudo") == "https://api.whatsapp.com/send?phone=11999990000&text=oi%20tudo"


def test_empty_inputs():
    assert format_message(None, {"name": "a"}, []) == ""
