from fastapi.testclient import TestClient

from tests.utils.raffle import create_random_raffle

PURCHASE_BODY = {
    "name": "Edgard Abanto Ruiz",
    "national_id": "45678912",
    "phone": "976476422",
    "email": "edgard@example.com",
    "quantity": 2,
    "operation_number": "99817",
}


def test_search_by_national_id(client: TestClient, db_session):
    raffle = create_random_raffle(db_session)
    client.post(f"/api/v1/raffles/{raffle.id}/purchase", json=PURCHASE_BODY)

    response = client.get("/api/v1/purchases/search", params={"national_id": "45678912"})

    assert response.status_code == 200
    data = response.json()
    assert [row["ticket_code"] for row in data] == ["471001", "471002"]
    assert data[0]["full_name"] == "EDGARD ABANTO"
    assert data[0]["raffle_title"] == raffle.title
    assert data[0]["status"].startswith("PENDIENTE")


def test_search_without_criteria(client: TestClient):
    response = client.get("/api/v1/purchases/search")

    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_FAILED"


def test_search_no_matches(client: TestClient):
    response = client.get("/api/v1/purchases/search", params={"ticket_code": "991001"})

    assert response.status_code == 404


def test_search_is_rate_limited(client: TestClient):
    for _ in range(10):
        client.get("/api/v1/purchases/search", params={"ticket_code": "991001"})

    response = client.get("/api/v1/purchases/search", params={"ticket_code": "991001"})

    assert response.status_code == 429
