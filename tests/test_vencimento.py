from datetime import date

import pytest

from services.vencimento import (
    classify_bucket, days_until_expiry, app_expiry_days, app_expiry_bucket,
    subscriber_bucket, matches_view, filter_subscribers, count_by_view,
    apply_expiry_preset, VIEWS,
)


@pytest.mark.parametrize("diff, bucket", [
    (-100, "overdue"), (-1, "overdue"),
    (0, "expiring_today"),
    (1, "expiring_2"), (2, "expiring_2"),
    (3, "expiring_5"), (4, "expiring_5"), (5, "expiring_5"),
    (6, "none"), (365, "none"),
    (None, "none"),
])
def test_classify_bucket(diff, bucket):
    assert classify_bucket(diff) == bucket


def test_days_until_expiry(today):
    assert days_until_expiry(date(2024, 3, 10), today) == 0
    assert days_until_expiry(date(2024, 3, 11), today) == 1
    assert days_until_expiry(date(2024, 3, 9), today) == -1
    assert days_until_expiry(None, today) is None


def test_subscriber_bucket_same_day_is_today(today):
    assert subscriber_bucket({"expiryDate": "2024-03-10"}, today) == "expiring_today"
    assert subscriber_bucket({"expiryDate": ""}, today) == "none"
    assert subscriber_bucket({"expiryDate": "quebrado"}, today) == "none"


def test_app_expiry_uses_minimum_credential(today):
    sub = {"credentials": [
        {"login": "a", "appExpiryDate": "2024-03-20"},
        {"login": "b", "appExpiryDate": "2024-03-12"},
        {"login": "c", "appExpiryDate": ""},
    ]}
    assert app_expiry_days(sub, today) == 2
    assert app_expiry_bucket(sub, today) == "expiring_2"


def test_app_expiry_without_dates_is_excluded(today):
    sub = {"status": "active", "credentials": [{"login": "a", "appExpiryDate": ""}]}
    assert app_expiry_days(sub, today) is None
    assert app_expiry_bucket(sub, today) == "none"
    assert not any(matches_view(sub, v, today) for v in ("app_expiring_5", "app_expiring_2", "app_expiring_today"))
    assert app_expiry_days({"credentials": None}, today) is None


def test_expiry_views_only_for_active(today):
    ativo = {"status": "active", "expiryDate": "2024-03-12"}
    pendente = {"status": "pending", "expiryDate": "2024-03-12"}
    assert matches_view(ativo, "expiring_2", today)
    assert not matches_view(ativo, "expiring_5", today)
    assert not matches_view(pendente, "expiring_2", today)
    assert matches_view(pendente, "pending", today)


def test_filter_subscribers_search_by_name_or_phone(today):
    subs = [
        {"id": 1, "name": "Maria Souza", "phone": "11999990000", "status": "active"},
        {"id": 2, "name": "João", "phone": "21988887777", "status": "active"},
        {"id": 3, "name": "Mariana", "phone": "", "status": "test"},
    ]
    assert [s["id"] for s in filter_subscribers(subs, "active", "maria", today)] == [1]
    assert [s["id"] for s in filter_subscribers(subs, "active", "2198", today)] == [2]
    assert [s["id"] for s in filter_subscribers(subs, "test", "", today)] == [3]


def test_count_by_view_covers_every_view(today):
    subs = [
        {"status": "active", "expiryDate": "2024-03-10"},
        {"status": "active", "expiryDate": "2024-03-14"},
        {"status": "inactive", "expiryDate": "2024-01-01"},
    ]
    counts = count_by_view(subs, today)
    assert set(counts) == set(VIEWS)
    assert counts["active"] == 2
    assert counts["expiring_today"] == 1
    assert counts["expiring_5"] == 1
    assert counts["inactive"] == 1


@pytest.mark.parametrize("preset, expected", [
    ("expiring_today", "2024-03-10"),
    ("expiring_2", "2024-03-12"),
    ("expiring_5", "2024-03-15"),
])
def test_apply_expiry_preset(today, preset, expected):
    novo = {"name": "X", "status": preset, "expiryDate": ""}
    out = apply_expiry_preset(novo, today)
    assert out["expiryDate"] == expected
    assert out["status"] == "active"
    assert novo["status"] == preset


def test_apply_expiry_preset_ignores_real_status(today):
    novo = {"status": "pending", "expiryDate": "2024-04-01"}
    assert apply_expiry_preset(novo, today) is novo
