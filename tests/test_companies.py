# tests/test_companies.py
from directorio.models.opinion import Opinion
from directorio.models.payment import MembershipPayment
from directorio.models.platform import Company


def company_payload(**overrides):
    payload = {
        "nombreEmpresa": "Maquinados Bajío",
        "email1": "ventas@maquinadosbajio.mx",
        "telefono1": "477 123 4567",
        "paisesPresencia": ["México"],
        "ubicacionGeografica": {"lat": 21.12, "lng": -101.68},
    }
    payload.update(overrides)
    return payload


# ***************************************************************
# Validación
# ***************************************************************

def test_create_company_requires_email1(client, admin, headers_for):
    payload = company_payload()
    del payload["email1"]
    response = client.post("/api/companies", json=payload, headers=headers_for(admin))
    assert response.status_code == 422


def test_create_company_rejects_invalid_email(client, admin, headers_for):
    response = client.post(
        "/api/companies",
        json=company_payload(email1="no-es-un-correo"),
        headers=headers_for(admin),
    )
    assert response.status_code == 422


def test_blank_optional_fields_become_null(client, admin, headers_for):
    response = client.post(
        "/api/companies",
        json=company_payload(email2="", sitioWeb="  "),
        headers=headers_for(admin),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["email2"] is None
    assert body["sitioWeb"] is None


def test_create_company_checks_references(client, admin, headers_for):
    response = client.post(
        "/api/companies",
        json=company_payload(categoriesIds=[999]),
        headers=headers_for(admin),
    )
    assert response.status_code == 404


def test_company_detail_expands_relations(client, admin, make_category, make_certificate, make_plan, headers_for):
    category = make_category()
    certificate = make_certificate()
    plan = make_plan()

    response = client.post(
        "/api/companies",
        json=company_payload(
            categoriesIds=[category.id],
            certificatesIds=[certificate.id],
            membershipTypeId=plan.id,
        ),
        headers=headers_for(admin),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["categories"][0]["nombreCategoria"] == category.nombre_categoria
    assert body["certificates"][0]["nombreCertificado"] == certificate.nombre_certificado
    assert body["membershipType"]["id"] == plan.id
    assert body["ubicacionGeografica"] == {"lat": 21.12, "lng": -101.68}


# ***************************************************************
# Acceso por rol
# ***************************************************************

def test_representative_company_starts_pending_and_owned(client, representative, headers_for):
    response = client.post("/api/companies", json=company_payload(), headers=headers_for(representative))
    assert response.status_code == 201
    body = response.json()
    assert body["userId"] == representative.id
    assert body["estado"] == "pendiente"


def test_representative_cannot_set_admin_fields(client, representative, headers_for):
    response = client.post(
        "/api/companies",
        json=company_payload(estado="activo"),
        headers=headers_for(representative),
    )
    assert response.status_code == 403


def test_representative_can_resend_unchanged_admin_fields(client, representative, make_company, headers_for):
    company = make_company(owner=representative, estado="activo")

    # El formulario reenvía la ficha completa, con los valores que ya tenía
    response = client.put(
        f"/api/companies/{company.id}",
        json={"nombreEmpresa": "Nuevo Nombre", "estado": "activo", "membershipTypeId": None},
        headers=headers_for(representative),
    )
    assert response.status_code == 200
    assert response.json()["nombreEmpresa"] == "Nuevo Nombre"

    response = client.put(
        f"/api/companies/{company.id}",
        json={"estado": "inactivo"},
        headers=headers_for(representative),
    )
    assert response.status_code == 403


def test_plain_user_cannot_create_company(client, plain_user, headers_for):
    response = client.post("/api/companies", json=company_payload(), headers=headers_for(plain_user))
    assert response.status_code == 403


def test_representative_sees_and_edits_only_own_companies(client, make_user, representative, make_company, headers_for):
    other = make_user("representante", email="otro@empresa.mx")
    own = make_company(owner=representative, nombre_empresa="Propia")
    foreign = make_company(owner=other, nombre_empresa="Ajena")

    assert client.get(f"/api/companies/{own.id}", headers=headers_for(representative)).status_code == 200
    assert client.get(f"/api/companies/{foreign.id}", headers=headers_for(representative)).status_code == 403

    edit_own = client.put(
        f"/api/companies/{own.id}",
        json={"descripcionEmpresa": "Nueva descripción"},
        headers=headers_for(representative),
    )
    assert edit_own.status_code == 200
    assert edit_own.json()["descripcionEmpresa"] == "Nueva descripción"

    edit_foreign = client.put(
        f"/api/companies/{foreign.id}",
        json={"descripcionEmpresa": "Intrusión"},
        headers=headers_for(representative),
    )
    assert edit_foreign.status_code == 403

    listing = client.get("/api/companies", headers=headers_for(representative)).json()
    assert [c["id"] for c in listing["companies"]] == [own.id]


def test_public_sees_only_active_companies(client, make_company):
    active = make_company(nombre_empresa="Activa")
    hidden = make_company(nombre_empresa="Oculta", estado="inactivo")

    listing = client.get("/api/companies").json()
    assert [c["id"] for c in listing["companies"]] == [active.id]
    assert client.get(f"/api/companies/{hidden.id}").status_code == 404


def test_admin_sees_all_companies(client, admin, make_company, headers_for):
    make_company(nombre_empresa="Activa")
    make_company(nombre_empresa="Pendiente", estado="pendiente")

    listing = client.get("/api/companies", headers=headers_for(admin)).json()
    assert listing["total"] == 2


def test_update_rejects_null_email1(client, admin, make_company, headers_for):
    company = make_company()
    response = client.put(f"/api/companies/{company.id}", json={"email1": None}, headers=headers_for(admin))
    assert response.status_code == 422


# ***************************************************************
# Filtros y paginación
# ***************************************************************

def test_filters_by_category_and_search(client, make_category, make_company):
    steel = make_category("Acero")
    make_company(nombre_empresa="Aceros del Norte", categories_ids=[steel.id])
    make_company(nombre_empresa="Textiles del Sur", email1="info@textilessur.mx")

    by_category = client.get("/api/companies", params={"categoryId": steel.id}).json()
    assert [c["nombreEmpresa"] for c in by_category["companies"]] == ["Aceros del Norte"]

    by_search = client.get("/api/companies", params={"search": "textil"}).json()
    assert by_search["total"] == 1
    assert by_search["companies"][0]["nombreEmpresa"] == "Textiles del Sur"


def test_pagination(client, make_company):
    for i in range(5):
        make_company(nombre_empresa=f"Empresa {i}")

    page = client.get("/api/companies", params={"page": 2, "limit": 2}).json()
    assert page["total"] == 5
    assert page["totalPages"] == 3
    assert page["page"] == 2
    assert len(page["companies"]) == 2


def test_my_companies(client, representative, make_company, headers_for):
    own = make_company(owner=representative)
    make_company(nombre_empresa="Sin dueño")

    response = client.get("/api/companies/mine", headers=headers_for(representative))
    assert [c["id"] for c in response.json()] == [own.id]


# ***************************************************************
# Opiniones públicas y eliminación
# ***************************************************************

def test_company_opinions_show_only_approved_with_average(client, make_company, make_opinion):
    company = make_company()
    make_opinion(company, estado="aprobada", calificacion=5)
    make_opinion(company, estado="aprobada", calificacion=4)
    make_opinion(company, estado="pendiente", calificacion=1)
    make_opinion(company, estado="rechazada", calificacion=1)

    body = client.get(f"/api/companies/{company.id}/opinions").json()
    assert body["total"] == 2
    assert body["promedio"] == 4.5
    assert all("email" not in o for o in body["opinions"])


def test_delete_company_removes_opinions_and_keeps_payments(
    client, db, admin, make_company, make_opinion, make_plan, headers_for
):
    company = make_company()
    plan = make_plan()
    make_opinion(company)
    db.add(MembershipPayment(
        company_id=company.id,
        membership_type_id=plan.id,
        stripe_payment_intent_id="pi_auditoria",
        amount=499,
        currency="mxn",
        status="succeeded",
    ))
    db.commit()
    company_id = company.id

    response = client.delete(f"/api/companies/{company_id}", headers=headers_for(admin))
    assert response.status_code == 204

    db.expire_all()
    assert db.get(Company, company_id) is None
    assert db.query(Opinion).count() == 0
    payment = db.query(MembershipPayment).one()
    assert payment.company_id is None
