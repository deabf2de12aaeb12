from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from empresas.main import create_app


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


def _create_company(client, cuit="30123456700", **extra):
    payload = {"cuit": cuit, "nombre": "Test Pyme SRL", "tipo": "PYME", **extra}
    return client.post("/empresas", json=payload)


def _days_ago(days: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"


def test_create_company(client):
    response = _create_company(client)

    assert response.status_code == 201
    body = response.json()
    assert body["cuit"] == "30123456700"
    assert body["nombre"] == "Test Pyme SRL"
    assert body["tipo"] == "PYME"
    joined = datetime.fromisoformat(body["fecha_adhesion"])
    assert datetime.now(timezone.utc) - joined < timedelta(seconds=5)


def test_create_company_accepts_camel_case_join_date(client):
    response = _create_company(client, fechaAdhesion="2025-01-15T10:00:00Z")

    assert response.status_code == 201
    joined = datetime.fromisoformat(response.json()["fecha_adhesion"])
    assert joined == datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)


def test_duplicate_company_is_a_conflict(client):
    assert _create_company(client).status_code == 201

    response = _create_company(client)

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "duplicate_key"
    assert body["error"] == "Conflict"


@pytest.mark.parametrize(
    "payload",
    [
        {"cuit": "3012345670", "nombre": "Corto", "tipo": "PYME"},
        {"cuit": "301234567001", "nombre": "Largo", "tipo": "PYME"},
        {"cuit": "30123456700", "nombre": "", "tipo": "PYME"},
        {"cuit": "30123456700", "nombre": "x" * 101, "tipo": "PYME"},
        {"cuit": "30123456700", "nombre": "Tipo Invalido", "tipo": "MEDIANA"},
        {"cuit": "30123456700", "nombre": "Fecha Invalida", "tipo": "PYME", "fecha_adhesion": "ayer"},
    ],
)
def test_invalid_company_payload(client, payload):
    assert client.post("/empresas", json=payload).status_code == 422


def test_transfer_for_unknown_company_is_a_client_error(client):
    response = client.post("/empresas/transferencias", json={"cuit_empresa": "99999999999"})

    assert response.status_code == 400
    assert response.json()["code"] == "reference_not_found"


def test_create_transfer(client):
    _create_company(client)

    response = client.post(
        "/empresas/transferencias",
        json={"cuitEmpresa": "30123456700", "monto": 1500.5},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["cuit_empresa"] == "30123456700"
    assert body["monto"] == "1500.50"
    assert body["id_transferencia"]


@pytest.mark.parametrize("monto", ["1234567890123456.78", "0.10", "7"])
def test_created_transfer_matches_stored_transfer(client, monto):
    _create_company(client)

    created = client.post(
        "/empresas/transferencias",
        json={"cuit_empresa": "30123456700", "monto": monto},
    )
    listed = client.get("/empresas/30123456700/transferencias").json()

    assert created.status_code == 201
    assert listed == [created.json()]
    assert Decimal(listed[0]["monto"]) == Decimal(monto)


@pytest.mark.parametrize("monto", ["1.005", "12345678901234567.89", "abc"])
def test_invalid_transfer_amount(client, monto):
    _create_company(client)

    response = client.post(
        "/empresas/transferencias",
        json={"cuit_empresa": "30123456700", "monto": monto},
    )

    assert response.status_code == 422
    assert client.get("/empresas/30123456700/transferencias").json() == []


def test_reports(client):
    _create_company(client, cuit="30100000010", fecha_adhesion=_days_ago(10))
    _create_company(client, cuit="30100000045", fecha_adhesion=_days_ago(45))
    for days in (1, 2, 3):
        client.post(
            "/empresas/transferencias",
            json={"cuit_empresa": "30100000045", "fecha_transferencia": _days_ago(days)},
        )
    client.post(
        "/empresas/transferencias",
        json={"cuit_empresa": "30100000010", "fecha_transferencia": _days_ago(60)},
    )

    joined = client.get("/empresas/adheridas-ultimo-mes").json()
    with_transfers = client.get("/empresas/con-transferencias-ultimo-mes").json()
    recent_transfers = client.get("/empresas/transferencias/ultimo-mes").json()

    assert [c["cuit"] for c in joined] == ["30100000010"]
    assert [c["cuit"] for c in with_transfers] == ["30100000045"]
    assert len(recent_transfers) == 3


def test_list_by_category(client):
    _create_company(client, cuit="30111111111")
    client.post("/empresas", json={"cuit": "30222222222", "nombre": "Corp SA", "tipo": "CORPORATIVA"})

    response = client.get("/empresas", params={"tipo": "CORPORATIVA"})

    assert response.status_code == 200
    assert [c["cuit"] for c in response.json()] == ["30222222222"]


def test_transfers_for_company(client):
    _create_company(client)
    client.post("/empresas/transferencias", json={"cuit_empresa": "30123456700"})

    assert len(client.get("/empresas/30123456700/transferencias").json()) == 1
    assert client.get("/empresas/99999999999/transferencias").status_code == 404


def test_delete_company(client):
    _create_company(client)
    client.post("/empresas/transferencias", json={"cuit_empresa": "30123456700"})

    response = client.delete("/empresas/30123456700")

    assert response.status_code == 200
    assert "30123456700" in response.json()["message"]
    assert client.get("/empresas/adheridas-ultimo-mes").json() == []
    assert client.get("/empresas/transferencias/ultimo-mes").json() == []


def test_delete_unknown_company(client):
    response = client.delete("/empresas/99999999999")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"
