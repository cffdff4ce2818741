import uuid

BOOKING = {
    "name": "  Asha Rao ",
    "email": "Asha.Rao@Mailbox.org",
    "phone": "9876543210",
    "age": 34,
    "gender": "Female",
    "city": "Pune",
    "consultation_mode": "Online",
    "message": "Lower back pain after running.",
}


async def test_book_appointment(client):
    response = await client.post("/api/appointments", json=BOOKING)

    assert response.status_code == 201
    appointment = response.json()["data"]
    assert appointment["status"] == "New"
    assert appointment["name"] == "Asha Rao"
    assert appointment["email"] == "asha.rao@mailbox.org"


async def test_invalid_booking_is_400(client):
    response = await client.post("/api/appointments", json=dict(BOOKING, gender="Unknown", age=-1))

    assert response.status_code == 400
    error = response.json()["error"]
    assert "gender" in error
    assert "age" in error


async def test_manage_appointments(client):
    first = (await client.post("/api/appointments", json=BOOKING)).json()["data"]
    second = (await client.post("/api/appointments", json=dict(BOOKING, name="Ravi"))).json()["data"]

    listing = (await client.get("/api/appointments")).json()
    assert listing["count"] == 2
    assert [item["id"] for item in listing["data"]] == [second["id"], first["id"]]

    updated = await client.put(f"/api/appointments/{first['id']}/status", json={"status": "Contacted"})
    assert updated.json()["data"]["status"] == "Contacted"

    assert (await client.put(f"/api/appointments/{first['id']}/status", json={"status": "Lost"})).status_code == 400

    deleted = await client.delete(f"/api/appointments/{first['id']}")
    assert deleted.json() == {"success": True, "message": "Appointment removed"}
    assert (await client.get(f"/api/appointments/{first['id']}")).status_code == 404


async def test_unknown_appointment_is_404(client):
    response = await client.get(f"/api/appointments/{uuid.uuid4()}")
    assert response.json() == {"success": False, "error": "Appointment not found"}


async def test_missing_setting_is_404(client):
    response = await client.get("/api/settings/hero_banner")
    assert response.status_code == 404
    assert response.json()["error"] == "Setting with key 'hero_banner' not found."


async def test_settings_upsert(client):
    created = await client.post("/api/settings", json={"key": "hero_banner", "value": "Welcome"})
    assert created.status_code == 200
    assert created.json()["message"] == "Setting updated successfully!"

    updated = await client.post("/api/settings", json={"key": "hero_banner", "value": "Hello again"})
    assert updated.json()["data"]["id"] == created.json()["data"]["id"]

    fetched = (await client.get("/api/settings/hero_banner")).json()["data"]
    assert fetched["value"] == "Hello again"


async def test_health(client):
    response = await client.get("/api/health")
    assert response.json() == {"success": True, "data": {"status": "ok"}}
