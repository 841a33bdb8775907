"""
HTTP tests for the customer and admin routers.
"""

from __future__ import annotations

import base64
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from vbunker.application.booking_flow_state import BookingFlowState
from vbunker.domain.entities.car import CarItem
from vbunker.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from vbunker.infrastructure.store.memory_store import MemoryProfileStore
from vbunker.main import app
from vbunker.wiring.dependencies import get_booking_flow_state

TZ = ZoneInfo("Europe/Moscow")
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=TZ)


def make_client() -> tuple[TestClient, BookingFlowState]:
    state = BookingFlowState(
        MemoryProfileStore(),
        ServiceCatalogStore(),
        timezone=TZ,
        clock=lambda: NOW,
        starter_cars=[CarItem(number="О212УС31", brand="LADA", model="Vesta")],
    )
    app.dependency_overrides[get_booking_flow_state] = lambda: state
    return TestClient(app), state


def as_admin(client: TestClient) -> None:
    client.post("/api/v1/login", json={"phone": "79009999999"})
    client.post("/api/v1/profile/role/toggle")


def test_health():
    client, _ = make_client()
    assert client.get("/health").json() == {"status": "ok"}


def test_login_and_profile():
    client, state = make_client()

    assert client.post("/api/v1/login", json={"phone": "   "}).status_code == 422

    response = client.post("/api/v1/login", json={"phone": " 79001234567 "})
    assert response.status_code == 200
    assert response.json()["phone"] == "79001234567"
    assert response.json()["is_logged_in"] is True

    avatar = base64.b64encode(b"avatar").decode("ascii")
    response = client.put(
        "/api/v1/profile",
        json={"first_name": " Анна ", "last_name": "Смирнова", "email": "a@example.com", "avatar_base64": avatar},
    )
    assert response.json()["first_name"] == "Анна"
    assert response.json()["avatar_base64"] == avatar
    assert state.avatar_image_data == b"avatar"

    bad = client.put("/api/v1/profile", json={"avatar_base64": "###"})
    assert bad.status_code == 422

    assert client.post("/api/v1/logout").status_code == 204
    assert client.get("/api/v1/profile").json()["is_logged_in"] is False


def test_customer_booking_flow():
    client, state = make_client()
    client.post("/api/v1/login", json={"phone": "79001234567"})

    categories = client.get("/api/v1/catalog/services").json()
    masters = client.get("/api/v1/catalog/masters").json()
    cars = client.get("/api/v1/cars").json()
    service_id = categories[0]["services"][0]["id"]

    client.put("/api/v1/draft/service", json={"service_id": service_id})
    client.put("/api/v1/draft/master", json={"master_id": masters[0]["id"]})
    client.put("/api/v1/draft/datetime", json={"date": "2026-10-20T00:00:00", "time": "11:00"})

    # car missing
    assert client.post("/api/v1/draft/confirm").status_code == 409

    draft = client.put("/api/v1/draft/car", json={"car_id": cars[0]["id"]}).json()
    assert draft["is_complete"] is True

    response = client.post("/api/v1/draft/confirm")
    assert response.status_code == 201
    booking = response.json()
    assert booking["car_plate"] == "О212УС31"
    assert booking["status"] == "active"
    assert client.get("/api/v1/draft").json()["service"] is None

    records = client.get("/api/v1/records").json()
    assert [b["id"] for b in records["upcoming"]] == [booking["id"]]
    assert records["past"] == []

    cancelled = client.post(f"/api/v1/bookings/{booking['id']}/cancel").json()
    assert cancelled["status"] == "cancelled"
    assert state.bookings[0].status.value == "cancelled"


def test_unknown_ids_return_404():
    client, _ = make_client()
    missing = "00000000-0000-0000-0000-000000000000"

    assert client.put("/api/v1/draft/service", json={"service_id": missing}).status_code == 404
    assert client.post(f"/api/v1/bookings/{missing}/cancel").status_code == 404
    assert client.delete(f"/api/v1/cars/{missing}").status_code == 404
    assert client.delete("/api/v1/draft/everything").status_code == 404


def test_draft_step_reset():
    client, _ = make_client()
    masters = client.get("/api/v1/catalog/masters").json()
    client.put("/api/v1/draft/master", json={"master_id": masters[0]["id"]})
    client.put("/api/v1/draft/datetime", json={"date": "2026-10-20T00:00:00", "time": "11:00"})

    draft = client.delete("/api/v1/draft/master").json()

    assert draft["master"] is None
    assert draft["time"] is None


def test_garage_endpoints():
    client, _ = make_client()

    assert client.post("/api/v1/cars", json={"number": "  "}).status_code == 422
    car = client.post("/api/v1/cars", json={"number": "А001АА31", "brand": "BMW"}).json()

    updated = client.put(f"/api/v1/cars/{car['id']}", json={"number": "А002АА31", "brand": "BMW"}).json()
    assert updated["number"] == "А002АА31"
    assert updated["id"] == car["id"]

    assert client.delete(f"/api/v1/cars/{car['id']}").status_code == 204
    assert [c["number"] for c in client.get("/api/v1/cars").json()] == ["О212УС31"]


def test_admin_router_requires_admin_role():
    client, _ = make_client()

    assert client.get("/api/v1/admin/bookings").status_code == 403

    as_admin(client)
    assert client.get("/api/v1/admin/bookings").status_code == 200


def test_admin_bookings_and_filters():
    client, _ = make_client()
    as_admin(client)

    payload = {
        "service_title": "Тонировка Передние стекла",
        "master_name": "Дмитрий",
        "date": "2026-10-18T00:00:00",
        "time": "18:00",
        "client_phone": "79000000001",
        "price": 4400,
    }
    assert client.post("/api/v1/admin/bookings", json={**payload, "client_phone": " "}).status_code == 422
    today = client.post("/api/v1/admin/bookings", json=payload).json()
    later = client.post(
        "/api/v1/admin/bookings",
        json={**payload, "date": "2026-10-25T00:00:00", "master_name": "Евгений"},
    ).json()

    assert today["car_plate"] == "Не указан"
    assert [b["id"] for b in client.get("/api/v1/admin/bookings").json()] == [today["id"]]
    upcoming = client.get("/api/v1/admin/bookings", params={"date_filter": "upcoming"}).json()
    assert [b["id"] for b in upcoming] == [today["id"], later["id"]]
    by_master = client.get("/api/v1/admin/bookings", params={"date_filter": "all", "master": "Евгений"}).json()
    assert [b["id"] for b in by_master] == [later["id"]]
    assert client.get("/api/v1/admin/bookings/masters").json() == ["Дмитрий", "Евгений"]

    priced = client.put(f"/api/v1/admin/bookings/{today['id']}/price", json={"price": None}).json()
    assert priced["price"] is None
    assert client.put(f"/api/v1/admin/bookings/{today['id']}/price", json={"price": -1}).status_code == 422


def test_admin_draft_booking():
    client, state = make_client()
    as_admin(client)

    assert client.post("/api/v1/admin/bookings/draft/start").json()["is_admin_booking_flow"] is True
    assert client.post("/api/v1/admin/bookings/from-draft", json={"client_phone": "790"}).status_code == 409

    categories = client.get("/api/v1/catalog/services").json()
    masters = client.get("/api/v1/catalog/masters").json()
    client.put("/api/v1/draft/service", json={"service_id": categories[0]["services"][0]["id"]})
    client.put("/api/v1/draft/master", json={"master_id": masters[0]["id"]})
    draft = client.put("/api/v1/draft/datetime", json={"date": "2026-10-20T00:00:00", "time": "11:00"}).json()
    assert draft["is_complete"] is True

    response = client.post("/api/v1/admin/bookings/from-draft", json={"client_phone": "79000000003"})
    assert response.status_code == 201
    assert response.json()["client_phone"] == "79000000003"
    assert state.is_admin_booking_flow is False


def test_admin_posts_and_reviews():
    client, state = make_client()
    as_admin(client)

    assert client.post("/api/v1/admin/posts/news", json={"text": "  "}).status_code == 422
    image = base64.b64encode(b"img").decode("ascii")
    post = client.post("/api/v1/admin/posts/news", json={"text": "Новость", "images_base64": [image]}).json()
    assert post["author_name"] == "VBunker31"
    assert post["admin_images_base64"] == [image]
    assert client.get("/api/v1/feed/news").json()[0]["id"] == post["id"]
    assert client.delete(f"/api/v1/admin/posts/news/{post['id']}").status_code == 204

    booking = client.post(
        "/api/v1/admin/bookings",
        json={
            "service_title": "Полировка Кузов",
            "master_name": "Евгений",
            "date": "2026-10-10T00:00:00",
            "time": "11:00",
            "client_phone": "79000000001",
        },
    ).json()
    review = client.post(f"/api/v1/bookings/{booking['id']}/reviews", json={"text": "Отлично"}).json()
    assert [r["id"] for r in client.get("/api/v1/admin/reviews/pending").json()] == [review["id"]]

    assert client.post(f"/api/v1/admin/reviews/{review['id']}/approve").status_code == 200
    assert client.post(f"/api/v1/admin/reviews/{review['id']}/approve").status_code == 404
    assert client.get("/api/v1/feed/reviews").json()[0]["text"] == "Отлично"
    assert state.pending_reviews == []


def test_admin_client_garage():
    client, _ = make_client()
    as_admin(client)

    car = client.post("/api/v1/admin/clients/79000000001/cars", json={"number": "К111КК31"}).json()
    updated = client.put(
        f"/api/v1/admin/clients/79000000001/cars/{car['id']}",
        json={"number": "К111КК31", "brand": "Kia"},
    ).json()

    assert updated["brand"] == "Kia"
    assert client.get("/api/v1/admin/clients/79000000001/cars").json() == [updated]
    assert client.get("/api/v1/admin/clients/79000000002/cars").json() == []


def test_admin_client_garage_for_own_phone():
    client, _ = make_client()
    as_admin(client)

    car = client.post("/api/v1/admin/clients/79009999999/cars", json={"number": "К222КК31"}).json()
    listed = [c["id"] for c in client.get("/api/v1/admin/clients/79009999999/cars").json()]
    assert car["id"] in listed

    updated = client.put(
        f"/api/v1/admin/clients/79009999999/cars/{car['id']}",
        json={"number": "К222КК31", "brand": "Kia"},
    )
    assert updated.status_code == 200
    assert updated.json()["brand"] == "Kia"


def test_admin_catalog_management():
    client, _ = make_client()
    as_admin(client)

    service = client.post(
        "/api/v1/admin/services",
        json={"category": "Керамика", "title": "Кузов", "price_text": "от 30000 ₽", "duration_minutes": 480},
    ).json()
    master = client.post("/api/v1/admin/masters", json={"name": "Игорь", "categories": ["Керамика"]}).json()

    assert "Керамика" in client.get("/api/v1/admin/categories").json()
    assert client.post("/api/v1/admin/masters", json={"name": " "}).status_code == 422

    renamed = client.put(f"/api/v1/admin/masters/{master['id']}", json={"name": "Игорь П.", "categories": []}).json()
    assert renamed["name"] == "Игорь П."
    assert renamed["categories"] == []

    assert client.delete(f"/api/v1/admin/services/{service['id']}").status_code == 204
    assert service["id"] not in [s["id"] for s in client.get("/api/v1/admin/services").json()]


def test_admin_edit_without_image_keeps_photo():
    client, state = make_client()
    as_admin(client)
    photo = base64.b64encode(b"photo").decode("ascii")

    service = client.post(
        "/api/v1/admin/services",
        json={"category": "Керамика", "title": "Кузов", "image_base64": photo},
    ).json()
    master = client.post("/api/v1/admin/masters", json={"name": "Игорь", "image_base64": photo}).json()

    edited_service = client.put(
        f"/api/v1/admin/services/{service['id']}",
        json={"category": "Керамика", "title": "Кузов и диски", "price_text": "от 35000 ₽"},
    ).json()
    edited_master = client.put(f"/api/v1/admin/masters/{master['id']}", json={"name": "Игорь П."}).json()

    assert edited_service["image_base64"] == photo
    assert edited_master["image_base64"] == photo
    assert state.admin_masters[-1].image_data == b"photo"

    other = base64.b64encode(b"other").decode("ascii")
    replaced = client.put(
        f"/api/v1/admin/masters/{master['id']}",
        json={"name": "Игорь П.", "image_base64": other},
    ).json()
    assert replaced["image_base64"] == other
