# tests/test_memberships.py
from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from directorio.core.payments import map_intent_status
from directorio.models.catalog import MembershipType
from directorio.models.payment import MembershipPayment
from directorio.models.platform import Company
from directorio.services.memberships import (
    apply_membership,
    apply_payment_status,
    compute_period_end,
    resolve_price,
)


@pytest.mark.parametrize("start, periodicidad, expected", [
    (date(2024, 1, 15), "mensual", date(2024, 2, 15)),
    (date(2024, 1, 31), "mensual", date(2024, 2, 29)),
    (date(2023, 1, 31), "mensual", date(2023, 2, 28)),
    (date(2024, 11, 10), "trimestral", date(2025, 2, 10)),
    (date(2024, 3, 1), "Anual", date(2025, 3, 1)),
    (date(2024, 3, 1), None, date(2024, 4, 1)),
])
def test_compute_period_end(start, periodicidad, expected):
    assert compute_period_end(start, periodicidad) == expected


def test_resolve_price_defaults_to_first_option():
    plan = MembershipType(opciones_precios=[{"periodicidad": "mensual", "costo": 299.5}, {"periodicidad": "anual", "costo": 2990}])
    assert resolve_price(plan) == {"periodicidad": "mensual", "costo": Decimal("299.50")}
    assert resolve_price(plan, " ANUAL ")["costo"] == Decimal("2990.00")


def test_resolve_price_without_options():
    with pytest.raises(HTTPException) as exc:
        resolve_price(MembershipType(opciones_precios=[]))
    assert exc.value.status_code == 400


def test_map_intent_status():
    assert map_intent_status("succeeded") == "succeeded"
    assert map_intent_status("requires_payment_method") == "failed"
    assert map_intent_status("canceled") == "canceled"
    assert map_intent_status("requires_action") == "pending"
    assert map_intent_status("algo_nuevo") == "pending"


def test_apply_membership_sets_billing_fields():
    company = Company(nombre_empresa="Demo", email1="demo@empresa.mx")
    payment = MembershipPayment(membership_type_id=7, stripe_payment_intent_id="pi_42", periodicidad="semestral")

    apply_membership(company, payment, today=date(2024, 5, 20))

    assert company.membership_type_id == 7
    assert company.forma_pago == "stripe"
    assert company.fecha_inicio_membresia == date(2024, 5, 20)
    assert company.fecha_fin_membresia == date(2024, 11, 20)
    assert "pi_42" in company.notas_membresia


def test_apply_payment_status_rejects_unknown_state(db):
    payment = MembershipPayment(stripe_payment_intent_id="pi_x", amount=1, currency="mxn", status="pending")
    with pytest.raises(ValueError):
        apply_payment_status(db, payment, "reembolsado")


def test_failed_payment_can_later_succeed(db, make_company, make_plan):
    company = make_company()
    plan = make_plan()
    payment = MembershipPayment(
        company_id=company.id,
        membership_type_id=plan.id,
        stripe_payment_intent_id="pi_reintento",
        amount=499,
        currency="mxn",
        periodicidad="mensual",
        status="failed",
    )
    db.add(payment)
    db.commit()

    apply_payment_status(db, payment, "succeeded")

    db.refresh(company)
    assert payment.status == "succeeded"
    assert company.membership_type_id == plan.id
