from datetime import date

import pytest
from freezegun import freeze_time

from services.errors import PlanNotFoundError, PersistenceError
from services.renovacao import (
    find_plan, plan_duration_days, months_for_duration, renew, renew_and_save,
)


def test_find_plan_by_name(plans):
    assert find_plan(plans, "Trimestral")["id"] == 2
    with pytest.raises(PlanNotFoundError) as exc:
        find_plan(plans, "Anual")
    assert exc.value.plan_name == "Anual"
    with pytest.raises(PlanNotFoundError):
        find_plan(plans, None)


@pytest.mark.parametrize("duration, days", [
    ("30", 30), (90, 90), ("", 30), (None, 30), ("abc", 30), ("0", 30), ("-30", 30),
])
def test_plan_duration_days(duration, days):
    assert plan_duration_days({"duration": duration}) == days
    assert plan_duration_days({}) == 30


@pytest.mark.parametrize("days, months", [(30, 1), (45, 1), (60, 2), (90, 3), (15, 0), (365, 12)])
def test_months_for_duration_floors(days, months):
    assert months_for_duration(days) == months


def test_renew_active_extends_from_current_expiry(plans, today):
    ent = {"id": 1, "plan": "Mensal", "status": "active", "expiryDate": "2024-03-20"}
    result = renew(ent, plans, today)
    assert result.entity["expiryDate"] == "2024-04-20"
    assert result.base_date == date(2024, 3, 20)
    assert result.months == 1
    assert ent["expiryDate"] == "2024-03-20"


def test_renew_overdue_anchors_to_today(plans, today):
    ent = {"id": 1, "plan": "Mensal", "status": "inactive", "expiryDate": "2023-12-01"}
    result = renew(ent, plans, today)
    assert result.entity["expiryDate"] == "2024-04-10"
    assert result.entity["status"] == "active"


def test_renew_without_expiry(plans, today):
    ent = {"id": 1, "plan": "Mensal", "status": "pending", "expiryDate": None}
    result = renew(ent, plans, today)
    assert result.base_date == today
    assert result.entity["expiryDate"] == "2024-04-10"
    assert result.entity["status"] == "active"


@pytest.mark.parametrize("plan, expected", [
    ("Trimestral", "2024-06-10"),
    ("Quinzena", "2024-04-10"),
    ("Sem duração", "2024-04-10"),
])
def test_renew_months_by_plan(plans, today, plan, expected):
    ent = {"id": 1, "plan": plan, "status": "test", "expiryDate": "2024-03-10"}
    assert renew(ent, plans, today).entity["expiryDate"] == expected


def test_renew_is_monotonic(plans, today):
    for exp in ("2020-01-01", "2024-03-09", "2024-03-10", "2024-03-31", "2025-01-31", None):
        ent = {"id": 1, "plan": "Mensal", "expiryDate": exp}
        result = renew(ent, plans, today)
        current = date.fromisoformat(exp) if exp else today
        assert result.new_expiry >= max(current, today)


def test_renew_end_of_month_clamps(plans):
    ent = {"id": 1, "plan": "Mensal", "expiryDate": "2024-01-31"}
    assert renew(ent, plans, date(2024, 1, 20)).entity["expiryDate"] == "2024-02-29"


def test_renew_unknown_plan_raises(plans, today):
    with pytest.raises(PlanNotFoundError):
        renew({"id": 1, "plan": "Inexistente"}, plans, today)


@freeze_time("2024-03-10 15:00:00")
def test_renew_defaults_to_today_in_sao_paulo(plans):
    result = renew({"id": 1, "plan": "Mensal", "expiryDate": ""}, plans)
    assert result.entity["expiryDate"] == "2024-04-10"


def test_renew_and_save_persists_partial_fields(fake_store, plans, today):
    store = fake_store(items=[{"id": 7, "plan": "Mensal", "status": "inactive", "expiryDate": "2024-01-01"}])
    result = renew_and_save(store, store.get_all()[0], plans, today)
    assert store.updates == [(7, {"expiryDate": "2024-04-10", "status": "active"})]
    assert result.new_expiry == date(2024, 4, 10)


def test_renew_and_save_failure_keeps_result(fake_store, plans, today):
    ent = {"id": 7, "plan": "Mensal", "status": "active", "expiryDate": "2024-03-15"}
    store = fake_store(items=[ent], fail_ids={7})
    with pytest.raises(PersistenceError) as exc:
        renew_and_save(store, ent, plans, today)
    assert exc.value.result.entity["expiryDate"] == "2024-04-15"


def test_renew_and_save_unknown_plan_does_not_write(fake_store, plans, today):
    ent = {"id": 7, "plan": "Nada", "status": "active", "expiryDate": "2024-03-15"}
    store = fake_store(items=[ent])
    with pytest.raises(PlanNotFoundError):
        renew_and_save(store, ent, plans, today)
    assert store.updates == []
