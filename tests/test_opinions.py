# tests/test_opinions.py
import pytest

from directorio.models.opinion import Opinion, OPINION_STATES


def opinion_payload(company_id, **overrides):
    payload = {
        "companyId": company_id,
        "nombre": "Jorge Ramírez",
        "email": "jorge@correo.com",
        "calificacion": 4,
        "comentario": "Buena atención, cotizaron rápido.",
    }
    payload.update(overrides)
    return payload


def test_anyone_can_submit_and_it_starts_pending(client, make_company):
    company = make_company()
    response = client.post("/api/opinions", json=opinion_payload(company.id))
    assert response.status_code == 201
    body = response.json()
    assert body["estado"] == "pendiente"
    assert body["fechaAprobacion"] is None
    assert body["aprobadoPor"] is None
    assert body["userId"] is None


def test_logged_in_author_is_linked(client, plain_user, make_company, headers_for):
    company = make_company()
    response = client.post("/api/opinions", json=opinion_payload(company.id), headers=headers_for(plain_user))
    assert response.json()["userId"] == plain_user.id


@pytest.mark.parametrize("calificacion", [0, 6])
def test_rating_out_of_range_is_rejected(client, make_company, calificacion):
    company = make_company()
    response = client.post("/api/opinions", json=opinion_payload(company.id, calificacion=calificacion))
    assert response.status_code == 422


def test_cannot_review_inactive_company(client, make_company):
    company = make_company(estado="pendiente")
    response = client.post("/api/opinions", json=opinion_payload(company.id))
    assert response.status_code == 404


def test_submission_blocked_in_maintenance(client, admin, make_company, headers_for):
    company = make_company()
    client.put("/api/system-settings", json={"modoMantenimiento": True}, headers=headers_for(admin))

    response = client.post("/api/opinions", json=opinion_payload(company.id))
    assert response.status_code == 503


def test_owner_representative_approves(client, representative, make_company, make_opinion, headers_for):
    company = make_company(owner=representative)
    opinion = make_opinion(company)

    response = client.post(f"/api/opinions/{opinion.id}/approve", headers=headers_for(representative))
    assert response.status_code == 200
    body = response.json()
    assert body["estado"] == "aprobada"
    assert body["fechaAprobacion"] is not None
    assert body["aprobadoPor"] == representative.id


def test_other_representative_cannot_moderate(client, make_user, representative, make_company, make_opinion, headers_for):
    other = make_user("representante", email="ajeno@empresa.mx")
    opinion = make_opinion(make_company(owner=other))

    assert client.post(f"/api/opinions/{opinion.id}/reject", headers=headers_for(representative)).status_code == 403
    assert client.get(f"/api/opinions/{opinion.id}", headers=headers_for(representative)).status_code == 403


def test_plain_user_cannot_moderate(client, plain_user, make_company, make_opinion, headers_for):
    opinion = make_opinion(make_company())
    assert client.post(f"/api/opinions/{opinion.id}/approve", headers=headers_for(plain_user)).status_code == 403


def test_reject_records_moderator(client, admin, make_company, make_opinion, headers_for):
    opinion = make_opinion(make_company())
    body = client.post(f"/api/opinions/{opinion.id}/reject", headers=headers_for(admin)).json()
    assert body["estado"] == "rechazada"
    assert body["aprobadoPor"] == admin.id
    assert body["fechaAprobacion"] is not None


def test_approve_then_delete_is_permanent(client, admin, make_company, make_opinion, headers_for):
    opinion = make_opinion(make_company())
    client.post(f"/api/opinions/{opinion.id}/approve", headers=headers_for(admin))

    assert client.delete(f"/api/opinions/{opinion.id}", headers=headers_for(admin)).status_code == 204
    assert client.get(f"/api/opinions/{opinion.id}", headers=headers_for(admin)).status_code == 404


def test_moderation_listing_is_scoped(client, admin, representative, make_company, make_opinion, headers_for):
    own = make_company(owner=representative)
    mine = make_opinion(own)
    make_opinion(make_company(nombre_empresa="Ajena"))

    scoped = client.get("/api/opinions", headers=headers_for(representative)).json()
    assert [o["id"] for o in scoped["opinions"]] == [mine.id]

    everything = client.get("/api/opinions", headers=headers_for(admin)).json()
    assert everything["total"] == 2


def test_listing_filters_by_state(client, admin, make_company, make_opinion, headers_for):
    company = make_company()
    make_opinion(company, estado="pendiente")
    approved = make_opinion(company, estado="aprobada")

    body = client.get("/api/opinions", params={"estado": "aprobada"}, headers=headers_for(admin)).json()
    assert [o["id"] for o in body["opinions"]] == [approved.id]

    invalid = client.get("/api/opinions", params={"estado": "borrada"}, headers=headers_for(admin))
    assert invalid.status_code == 400


def test_admin_edits_content_but_not_state(client, admin, make_company, make_opinion, headers_for):
    opinion = make_opinion(make_company())
    response = client.put(
        f"/api/opinions/{opinion.id}",
        json={"comentario": "Comentario corregido por moderación.", "estado": "aprobada"},
        headers=headers_for(admin),
    )
    assert response.status_code == 200
    assert response.json()["comentario"] == "Comentario corregido por moderación."
    assert response.json()["estado"] == "pendiente"


def test_moderated_opinions_always_carry_moderation_data(
    client, db, admin, make_company, make_opinion, headers_for
):
    company = make_company()
    first = make_opinion(company)
    second = make_opinion(company)
    make_opinion(company)

    client.post(f"/api/opinions/{first.id}/approve", headers=headers_for(admin))
    client.post(f"/api/opinions/{second.id}/reject", headers=headers_for(admin))

    db.expire_all()
    for opinion in db.query(Opinion).all():
        assert opinion.estado in OPINION_STATES
        if opinion.estado != "pendiente":
            assert opinion.fecha_aprobacion is not None
            assert opinion.aprobado_por is not None
