from services.schemas import (
    map_client_from_db, map_client_to_db, map_reseller_to_db, map_plan_from_db,
    map_plan_to_db, map_receipt_to_db, map_receipt_from_db, map_pix_to_db, map_many,
)


def test_client_from_db_defaults():
    c = map_client_from_db({"id": "a1", "name": "Ana", "expiry_date": "2024-03-10", "credentials": "x"})
    assert c["expiryDate"] == "2024-03-10"
    assert c["status"] == "active"
    assert c["credentials"] == []
    assert c["screens"] == 1
    assert map_client_from_db(None) is None


def test_client_to_db_full():
    row = map_client_to_db({
        "name": "Ana", "phone": "11", "expiryDate": "2024-03-10T00:00:00Z",
        "credentials": [{"login": "u", "appExpiryDate": "2024-05-01"}],
    })
    assert row["expiry_date"] == "2024-03-10"
    assert row["status"] == "active"
    assert row["credentials"] == [{"login": "u", "password": "", "appUsed": "", "appExpiryDate": "2024-05-01"}]
    assert row["plan"] is None


def test_partial_update_sends_only_given_fields():
    assert map_client_to_db({"status": "inactive"}, partial=True) == {"status": "inactive"}
    assert map_reseller_to_db({"expiryDate": "2024-04-10", "status": "active"}, partial=True) == {
        "expiry_date": "2024-04-10", "status": "active",
    }


def test_plan_mapping():
    p = map_plan_from_db({"id": 1, "name": "Mensal", "price": 35.5, "duration": 30})
    assert (p["price"], p["duration"]) == ("35.5", "30")
    row = map_plan_to_db({"name": "Mensal", "price": "35,50", "duration": ""})
    assert row["price"] == 35.5
    assert row["duration"] == 30


def test_receipt_dates():
    row = map_receipt_to_db({"clientId": 1, "date": "09/03/2024", "amount": "35,00", "expiryDate": "2024-04-09"})
    assert row["payment_date"] == "2024-03-09"
    assert row["amount"] == 35.0
    back = map_receipt_from_db({**row, "id": 9})
    assert back["date"] == "09/03/2024"
    assert map_receipt_to_db({"amount": "1"}, partial=True) == {"amount": 1.0}


def test_pix_and_many():
    assert map_pix_to_db({"key": "abc"})["pix_key"] == "abc"
    assert map_many([{"id": 1}, None, "x"], map_client_from_db)[0]["id"] == 1
    assert map_many(None, map_client_from_db) == []
