# tests/test_catalog.py
from directorio.models.platform import Company


# ***************************************************************
# Categorías
# ***************************************************************

def test_categories_are_public_but_writes_need_admin(client, representative, make_category, headers_for):
    make_category("Construcción")
    assert client.get("/api/categories").status_code == 200

    response = client.post(
        "/api/categories",
        json={"nombreCategoria": "Logística"},
        headers=headers_for(representative),
    )
    assert response.status_code == 403


def test_category_crud(client, admin, headers_for):
    created = client.post(
        "/api/categories",
        json={"nombreCategoria": "Logística", "descripcion": "Transporte y almacenaje"},
        headers=headers_for(admin),
    )
    assert created.status_code == 201
    category = created.json()
    assert category["icono"] == "Tag"

    updated = client.put(
        f"/api/categories/{category['id']}",
        json={"icono": "Truck"},
        headers=headers_for(admin),
    )
    assert updated.json()["icono"] == "Truck"
    assert updated.json()["nombreCategoria"] == "Logística"

    assert client.delete(f"/api/categories/{category['id']}", headers=headers_for(admin)).status_code == 204
    assert client.get(f"/api/categories/{category['id']}").status_code == 404


def test_category_update_rejects_null_name(client, admin, make_category, headers_for):
    category = make_category()
    response = client.put(
        f"/api/categories/{category.id}",
        json={"nombreCategoria": None},
        headers=headers_for(admin),
    )
    assert response.status_code == 422


def test_deleting_category_removes_it_from_companies(client, db, admin, make_category, make_company, headers_for):
    keep = make_category("Minería")
    drop = make_category("Textil")
    company = make_company(categories_ids=[keep.id, drop.id])

    client.delete(f"/api/categories/{drop.id}", headers=headers_for(admin))

    db.expire_all()
    assert db.get(Company, company.id).categories_ids == [keep.id]


# ***************************************************************
# Certificados
# ***************************************************************

def test_certificate_crud_and_company_cleanup(client, db, admin, make_company, headers_for):
    created = client.post(
        "/api/certificates",
        json={"nombreCertificado": "ISO 14001", "imagenUrl": "/uploads/images/iso14001.png"},
        headers=headers_for(admin),
    )
    assert created.status_code == 201
    certificate_id = created.json()["id"]
    assert created.json()["estado"] == "activo"

    company = make_company(certificates_ids=[certificate_id])
    assert client.get(f"/api/certificates/{certificate_id}").status_code == 200

    assert client.delete(f"/api/certificates/{certificate_id}", headers=headers_for(admin)).status_code == 204
    db.expire_all()
    assert db.get(Company, company.id).certificates_ids == []


def test_certificate_requires_image(client, admin, headers_for):
    response = client.post(
        "/api/certificates",
        json={"nombreCertificado": "Sin imagen"},
        headers=headers_for(admin),
    )
    assert response.status_code == 422


# ***************************************************************
# Tipos de membresía
# ***************************************************************

def test_private_plans_are_hidden_from_public(client, admin, make_plan, headers_for):
    public_plan = make_plan("Plan Plata")
    private_plan = make_plan("Plan Corporativo", visibilidad="privada")

    public = client.get("/api/membership-types/public").json()
    assert [p["id"] for p in public] == [public_plan.id]

    assert client.get(f"/api/membership-types/{private_plan.id}").status_code == 404
    assert client.get(f"/api/membership-types/{private_plan.id}", headers=headers_for(admin)).status_code == 200

    assert client.get("/api/membership-types").status_code == 401
    all_plans = client.get("/api/membership-types", headers=headers_for(admin)).json()
    assert len(all_plans) == 2


def test_create_plan_validates_prices(client, admin, headers_for):
    response = client.post(
        "/api/membership-types",
        json={"nombrePlan": "Plan Roto", "opcionesPrecios": [{"periodicidad": "mensual", "costo": -1}]},
        headers=headers_for(admin),
    )
    assert response.status_code == 422


def test_plan_in_use_cannot_be_deleted(client, admin, make_plan, make_company, headers_for):
    plan = make_plan()
    make_company(membership_type_id=plan.id)

    response = client.delete(f"/api/membership-types/{plan.id}", headers=headers_for(admin))
    assert response.status_code == 400


# ***************************************************************
# Roles
# ***************************************************************

def test_roles_crud_is_admin_only(client, admin, representative, headers_for):
    assert client.get("/api/roles", headers=headers_for(representative)).status_code == 403

    created = client.post(
        "/api/roles",
        json={"nombre": "moderador", "permisos": ["opiniones:moderar"]},
        headers=headers_for(admin),
    )
    assert created.status_code == 201
    role_id = created.json()["id"]

    duplicate = client.post("/api/roles", json={"nombre": "moderador"}, headers=headers_for(admin))
    assert duplicate.status_code == 400

    updated = client.put(f"/api/roles/{role_id}", json={"estado": "inactivo"}, headers=headers_for(admin))
    assert updated.json()["estado"] == "inactivo"

    assert client.delete(f"/api/roles/{role_id}", headers=headers_for(admin)).status_code == 204
    assert client.get(f"/api/roles/{role_id}", headers=headers_for(admin)).status_code == 404
