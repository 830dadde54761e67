from services.relatorios import dashboard_stats, upcoming_expirations, revenue_by_plan, receipts_by_month


def test_dashboard_stats(today):
    clients = [
        {"status": "active", "expiryDate": "2024-03-10"},
        {"status": "active", "expiryDate": "2024-03-10T10:00:00"},
        {"status": "inactive", "expiryDate": "2024-03-10"},
        {"status": "active", "expiryDate": "2024-04-10"},
    ]
    resellers = [{"status": "active", "expiryDate": ""}]
    assert dashboard_stats(clients, resellers, today) == {
        "active_clients": 3, "active_resellers": 1,
        "clients_expiring_today": 2, "resellers_expiring_today": 0,
    }


def test_upcoming_expirations_sorted(today):
    subs = [
        {"name": "C", "status": "active", "expiryDate": "2024-03-15"},
        {"name": "A", "status": "active", "expiryDate": "2024-03-11"},
        {"name": "Hoje", "status": "active", "expiryDate": "2024-03-10"},
        {"name": "Longe", "status": "active", "expiryDate": "2024-03-16"},
        {"name": "Inativo", "status": "inactive", "expiryDate": "2024-03-12"},
    ]
    df = upcoming_expirations(subs, today)
    assert list(df["Nome"]) == ["A", "C"]
    assert list(df["Dias"]) == [1, 5]
    assert upcoming_expirations([], today).empty


def test_revenue_by_plan(plans):
    clients = [
        {"plan": "Mensal", "status": "active"},
        {"plan": "Mensal", "status": "active"},
        {"plan": "Mensal", "status": "inactive"},
        {"plan": "Trimestral", "status": "active"},
    ]
    df = revenue_by_plan(clients, plans).set_index("Plano")
    assert df.loc["Mensal", "Clientes"] == 2
    assert df.loc["Mensal", "Receita"] == 70.0
    assert df.loc["Trimestral", "Receita"] == 90.0
    assert df.loc["Quinzena", "Clientes"] == 0
    assert revenue_by_plan([], plans)["Receita"].sum() == 0
    assert revenue_by_plan(clients, []).empty


def test_receipts_by_month():
    receipts = [
        {"date": "09/03/2024", "amount": "35.00"},
        {"date": "20/03/2024", "amount": "35,00"},
        {"date": "01/04/2024", "amount": "90"},
        {"date": "", "amount": "10"},
    ]
    s = receipts_by_month(receipts)
    assert s.to_dict() == {"2024-03": 70.0, "2024-04": 90.0}
    assert receipts_by_month([]).empty
