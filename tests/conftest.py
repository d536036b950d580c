# tests/conftest.py
import os
import tempfile

# La configuración se lee al importar la app: SQLite en memoria y sin Stripe real
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "clave-de-pruebas"
os.environ["IDENTITY_SHARED_SECRET"] = ""
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="directorio-uploads-")

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from directorio.main import app
from directorio.database import Base, engine, SessionLocal
from directorio.core.payments import PaymentGateway, get_payment_gateway
from directorio.core.security import create_access_token, get_password_hash
from directorio.models.auth import User, ROLE_ADMIN, ROLE_USER, ROLE_REPRESENTATIVE
from directorio.models.catalog import Category, Certificate, MembershipType
from directorio.models.opinion import Opinion
from directorio.models.platform import Company


@pytest.fixture(autouse=True)
def reset_database():
    """Cada prueba empieza con tablas vacías."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway():
    """Procesador de pagos simulado."""
    mock = MagicMock(spec=PaymentGateway)
    mock.create_payment_intent.return_value = {
        "id": "pi_test_001",
        "client_secret": "pi_test_001_secret_abc",
        "status": "requires_payment_method",
    }
    mock.retrieve_payment_intent.return_value = {
        "id": "pi_test_001",
        "status": "succeeded",
        "amount": 49900,
        "currency": "mxn",
    }
    mock.create_customer.return_value = "cus_test_001"
    mock.retrieve_customer.return_value = None
    return mock


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ***************************************************************
# Fábricas
# ***************************************************************

@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=ROLE_USER, email=None, password="secreto123", is_active=True):
        counter["n"] += 1
        user = User(
            provider_uid=f"uid-{role}-{counter['n']}",
            email=email or f"{role}{counter['n']}@correo.com",
            display_name=f"Usuario {counter['n']}",
            role=role,
            password_hash=get_password_hash(password),
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(ROLE_ADMIN, email="admin@empresa.mx")


@pytest.fixture
def representative(make_user):
    return make_user(ROLE_REPRESENTATIVE, email="rep@empresa.mx")


@pytest.fixture
def plain_user(make_user):
    return make_user(ROLE_USER, email="cliente@correo.com")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}


@pytest.fixture
def headers_for():
    """Cabecera Bearer con un token de acceso para el usuario dado."""
    return auth_headers


@pytest.fixture
def make_company(db):
    def _make(owner=None, estado="activo", **fields):
        company = Company(
            nombre_empresa=fields.pop("nombre_empresa", "Aceros del Norte"),
            email1=fields.pop("email1", "contacto@acerosnorte.mx"),
            user_id=owner.id if owner is not None else None,
            estado=estado,
            **fields,
        )
        db.add(company)
        db.commit()
        db.refresh(company)
        return company

    return _make


@pytest.fixture
def make_plan(db):
    def _make(nombre="Plan Oro", precios=None, visibilidad="publica"):
        plan = MembershipType(
            nombre_plan=nombre,
            opciones_precios=precios if precios is not None else [
                {"periodicidad": "mensual", "costo": 499.0},
                {"periodicidad": "anual", "costo": 4990.0},
            ],
            beneficios=["Ficha destacada"],
            visibilidad=visibilidad,
        )
        db.add(plan)
        db.commit()
        db.refresh(plan)
        return plan

    return _make


@pytest.fixture
def make_category(db):
    def _make(nombre="Construcción"):
        category = Category(nombre_categoria=nombre)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def make_certificate(db):
    def _make(nombre="ISO 9001"):
        certificate = Certificate(nombre_certificado=nombre, imagen_url="/uploads/images/iso.png")
        db.add(certificate)
        db.commit()
        db.refresh(certificate)
        return certificate

    return _make


@pytest.fixture
def make_opinion(db):
    def _make(company, estado="pendiente", calificacion=5):
        opinion = Opinion(
            company_id=company.id,
            nombre="Laura Pérez",
            email="laura@correo.com",
            calificacion=calificacion,
            comentario="Excelente servicio y entrega puntual.",
            estado=estado,
        )
        db.add(opinion)
        db.commit()
        db.refresh(opinion)
        return opinion

    return _make
