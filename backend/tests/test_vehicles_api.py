from __future__ import annotations

import json

import pytest

from showroom.api.v1 import vehicles as vehicles_api
from showroom.core.config import settings
from showroom.models.vehicle_model import Vehicle
from showroom.store.vehicle_store import SqlAlchemyVehicleStore


def _image(name: str, content: bytes = b"img"):
    return ("images", (name, content, "image/jpeg"))


@pytest.fixture
def stored_vehicle(db_session):
    vehicle = Vehicle(
        type="Sedan",
        brand="Toyota",
        model="Corolla",
        color="Silver",
        engine_size="1.8L",
        year=2021,
        price=18500,
        description="Reliable commuter.",
        images=["/uploads/old1.jpg", "/uploads/old2.jpg"],
    )
    db_session.add(vehicle)
    db_session.commit()
    db_session.refresh(vehicle)
    return vehicle


def test_create_vehicle_with_generated_description(client, auth_headers, upload_dir) -> None:
    resp = client.post(
        "/api/vehicles",
        data={"type": "Sedan", "brand": "Toyota", "model": "Corolla", "engineSize": "1.8L", "year": "2021"},
        files=[_image("front.jpg"), _image("rear.jpg")],
        headers=auth_headers,
    )

    assert resp.status_code == 201
    vehicle = resp.json()
    assert vehicle["id"] > 0
    assert vehicle["engineSize"] == "1.8L"
    assert vehicle["price"] == 0
    assert vehicle["description"] == "A Toyota Corolla (2021) with 1.8L - a reliable choice for everyday driving."
    assert len(vehicle["images"]) == 2
    assert all(ref.startswith("/uploads/") for ref in vehicle["images"])
    assert len(list(upload_dir.iterdir())) == 2
    assert vehicle["createdAt"] is not None


def test_create_vehicle_keeps_given_description(client, auth_headers) -> None:
    resp = client.post(
        "/api/vehicles",
        data={"type": "SUV", "brand": "Kia", "model": "Sportage", "price": "27999.99", "description": "Family SUV."},
        headers=auth_headers,
    )

    assert resp.status_code == 201
    assert resp.json()["description"] == "Family SUV."
    assert resp.json()["price"] == pytest.approx(27999.99)
    assert resp.json()["images"] == []


def test_create_vehicle_requires_classification_fields(client, auth_headers) -> None:
    resp = client.post("/api/vehicles", data={"brand": "Kia"}, headers=auth_headers)

    assert resp.status_code == 400
    assert "message" in resp.json()


def test_create_vehicle_rejects_too_many_images(client, auth_headers, monkeypatch) -> None:
    monkeypatch.setattr(settings, "MAX_UPLOAD_IMAGES", 1)

    resp = client.post(
        "/api/vehicles",
        data={"type": "SUV", "brand": "Kia", "model": "Sportage"},
        files=[_image("a.jpg"), _image("b.jpg")],
        headers=auth_headers,
    )

    assert resp.status_code == 400


def test_create_vehicle_rejects_oversized_image(client, auth_headers, upload_dir, monkeypatch) -> None:
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 8)

    resp = client.post(
        "/api/vehicles",
        data={"type": "SUV", "brand": "Kia", "model": "Sportage"},
        files=[_image("a.jpg", b"x" * 9)],
        headers=auth_headers,
    )

    assert resp.status_code == 400
    assert resp.json() == {"message": "Image too large: a.jpg"}
    assert list(upload_dir.iterdir()) == []


def test_failed_create_removes_stored_uploads(client, auth_headers, upload_dir, monkeypatch) -> None:
    def broken_add(self, vehicle):
        raise RuntimeError("database gone")

    monkeypatch.setattr(SqlAlchemyVehicleStore, "add", broken_add)

    resp = client.post(
        "/api/vehicles",
        data={"type": "SUV", "brand": "Kia", "model": "Sportage"},
        files=[_image("a.jpg")],
        headers=auth_headers,
    )

    assert resp.status_code == 500
    assert resp.json() == {"message": "Server error"}
    assert list(upload_dir.iterdir()) == []


@pytest.mark.parametrize(
    "headers, message",
    [
        ({}, "No token"),
        ({"Authorization": "Bearer"}, "Invalid token format"),
        ({"Authorization": "Bearer not-a-jwt"}, "Token invalid"),
    ],
)
def test_admin_routes_require_bearer_token(client, headers, message) -> None:
    resp = client.post("/api/vehicles", data={"type": "SUV", "brand": "Kia", "model": "Rio"}, headers=headers)

    assert resp.status_code == 401
    assert resp.json() == {"message": message}


def test_list_and_filter_vehicles(client, db_session) -> None:
    db_session.add_all([
        Vehicle(type="SUV", brand="Kia", model="Sportage", price=28000, year=2023, images=[]),
        Vehicle(type="Sedan", brand="Kia", model="Rio", price=15000, year=2020, images=[]),
        Vehicle(type="SUV", brand="BMW", model="X5", price=72000, year=2022, images=[]),
    ])
    db_session.commit()

    everything = client.get("/api/vehicles").json()
    assert everything["total"] == 3

    kia = client.get("/api/vehicles", params={"brand": "Kia"}).json()
    assert {v["model"] for v in kia["data"]} == {"Sportage", "Rio"}

    mid_range = client.get("/api/vehicles", params={"minPrice": 20000, "maxPrice": 50000}).json()
    assert [v["model"] for v in mid_range["data"]] == ["Sportage"]

    suvs_2022 = client.get("/api/vehicles", params={"type": "SUV", "year": 2022}).json()
    assert [v["model"] for v in suvs_2022["data"]] == ["X5"]


@pytest.fixture
def three_vehicles(db_session):
    db_session.add_all([
        Vehicle(type="SUV", brand="Kia", model="Sportage", price=28000, images=[]),
        Vehicle(type="Sedan", brand="Kia", model="Rio", price=15000, images=[]),
        Vehicle(type="SUV", brand="BMW", model="X5", price=72000, images=[]),
    ])
    db_session.commit()


def test_list_vehicles_paginates(client, three_vehicles) -> None:
    first = client.get("/api/vehicles", params={"page": 1, "limit": 2}).json()
    second = client.get("/api/vehicles", params={"page": 2, "limit": 2}).json()

    assert [v["model"] for v in first["data"]] == ["X5", "Rio"]
    assert [v["model"] for v in second["data"]] == ["Sportage"]
    assert (first["total"], first["page"], first["limit"]) == (3, 1, 2)
    assert (second["total"], second["page"], second["limit"]) == (3, 2, 2)


def test_list_vehicles_total_counts_every_match(client, three_vehicles) -> None:
    body = client.get("/api/vehicles", params={"brand": "Kia", "limit": 1}).json()

    assert len(body["data"]) == 1
    assert body["total"] == 2


def test_list_vehicles_clamps_out_of_range_paging(client, three_vehicles) -> None:
    body = client.get("/api/vehicles", params={"page": -1, "limit": 200}).json()

    assert body["page"] == 1
    assert body["limit"] == 100
    assert len(body["data"]) == 3


def test_list_vehicles_defaults_to_first_page(client, three_vehicles) -> None:
    body = client.get("/api/vehicles").json()

    assert (body["page"], body["limit"]) == (1, 20)


def test_get_vehicle_by_id(client, stored_vehicle) -> None:
    resp = client.get(f"/api/vehicles/{stored_vehicle.id}")

    assert resp.status_code == 200
    assert resp.json()["model"] == "Corolla"
    assert resp.json()["images"] == ["/uploads/old1.jpg", "/uploads/old2.jpg"]


def test_get_missing_vehicle_returns_404(client) -> None:
    resp = client.get("/api/vehicles/9999")

    assert resp.status_code == 404
    assert resp.json() == {"message": "Not found"}


def test_update_merges_kept_images_with_uploads(client, auth_headers, stored_vehicle, upload_dir) -> None:
    resp = client.put(
        f"/api/vehicles/{stored_vehicle.id}",
        data={"keepImages": json.dumps(["/uploads/old1.jpg"]), "price": "17999"},
        files=[_image("new1.jpg"), _image("new2.jpg")],
        headers=auth_headers,
    )

    assert resp.status_code == 200
    vehicle = resp.json()
    assert vehicle["images"][0] == "/uploads/old1.jpg"
    assert len(vehicle["images"]) == 3
    assert all(ref.startswith("/uploads/") for ref in vehicle["images"][1:])
    assert vehicle["price"] == 17999
    # Untouched fields keep their stored values
    assert vehicle["brand"] == "Toyota"
    assert vehicle["description"] == "Reliable commuter."


def test_update_without_keep_list_drops_previous_images(client, auth_headers, stored_vehicle) -> None:
    resp = client.put(
        f"/api/vehicles/{stored_vehicle.id}",
        data={"color": "Red"},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["images"] == []
    assert resp.json()["color"] == "Red"


def test_update_rejects_malformed_keep_list(client, auth_headers, stored_vehicle) -> None:
    resp = client.put(
        f"/api/vehicles/{stored_vehicle.id}",
        data={"keepImages": "/uploads/old1.jpg"},
        headers=auth_headers,
    )

    assert resp.status_code == 400
    assert resp.json() == {"message": "keepImages must be a JSON array of strings"}


def test_update_regenerates_description(client, auth_headers, stored_vehicle) -> None:
    resp = client.put(
        f"/api/vehicles/{stored_vehicle.id}",
        data={"regenerate": "true", "description": "ignored", "keepImages": "[]"},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["description"] == "A Toyota Corolla (2021) with 1.8L - a reliable choice for everyday driving."


def test_update_missing_vehicle_returns_404(client, auth_headers) -> None:
    resp = client.put("/api/vehicles/9999", data={"color": "Red"}, headers=auth_headers)

    assert resp.status_code == 404


def test_failed_update_removes_new_uploads_only(client, auth_headers, stored_vehicle, upload_dir, monkeypatch) -> None:
    (upload_dir / "old1.jpg").write_bytes(b"old")

    def broken_save(self, vehicle):
        raise RuntimeError("database gone")

    monkeypatch.setattr(SqlAlchemyVehicleStore, "save", broken_save)

    resp = client.put(
        f"/api/vehicles/{stored_vehicle.id}",
        data={"keepImages": json.dumps(["/uploads/old1.jpg"])},
        files=[_image("a.jpg")],
        headers=auth_headers,
    )

    assert resp.status_code == 500
    assert resp.json() == {"message": "Server error"}
    assert [p.name for p in upload_dir.iterdir()] == ["old1.jpg"]


def test_update_queues_orphaned_images(client, auth_headers, stored_vehicle, monkeypatch) -> None:
    queued = []
    monkeypatch.setattr(vehicles_api, "schedule_upload_purge", lambda refs: queued.append(list(refs)))

    resp = client.put(
        f"/api/vehicles/{stored_vehicle.id}",
        data={"keepImages": json.dumps(["/uploads/old2.jpg"])},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert queued == [["/uploads/old1.jpg"]]


def test_delete_vehicle(client, auth_headers, stored_vehicle) -> None:
    resp = client.delete(f"/api/vehicles/{stored_vehicle.id}", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Deleted"}
    assert client.get(f"/api/vehicles/{stored_vehicle.id}").status_code == 404
    assert client.delete(f"/api/vehicles/{stored_vehicle.id}", headers=auth_headers).status_code == 404


def test_generate_description_endpoint(client) -> None:
    resp = client.post("/api/vehicles/generate-description", json={"brand": "Mazda", "model": "CX-5", "year": 2024})

    assert resp.status_code == 200
    assert resp.json() == {
        "description": "A Mazda CX-5 (2024) with engine N/A - a reliable choice for everyday driving."
    }


def test_generate_description_requires_brand_and_model(client) -> None:
    resp = client.post("/api/vehicles/generate-description", json={"brand": "Mazda"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Brand and model are required"}


def test_generate_description_reports_collaborator_failure(client, monkeypatch) -> None:
    def broken(traits):
        raise RuntimeError("boom")

    monkeypatch.setattr(vehicles_api, "describe_vehicle", broken)

    resp = client.post("/api/vehicles/generate-description", json={"brand": "Mazda", "model": "CX-5"})

    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to generate description"}
