from __future__ import annotations

import io
from datetime import datetime

import pytest
from PIL import Image

LAT, LON = "-6.2088", "106.8456"


def login(client, username, password):
    return client.post("/api/login", json={"username": username, "password": password})


@pytest.fixture
def staff(client):
    assert login(client, "zaki", "staff123").status_code == 200
    return client


@pytest.fixture
def admin(client):
    assert login(client, "munir", "admin123").status_code == 200
    return client


def selfie() -> io.BytesIO:
    buf = io.BytesIO()
    Image.new("RGB", (32, 32), (200, 30, 30)).save(buf, format="PNG")
    buf.seek(0)
    return buf


def post_checkin(client, lat=LAT, lon=LON):
    return client.post(
        "/api/attendance/checkin",
        data={"latitude": lat, "longitude": lon, "selfie": (selfie(), "selfie.png")},
        content_type="multipart/form-data",
    )


def test_health(client):
    assert client.get("/api/health").get_json() == {"success": True, "status": "ok"}


def test_login_rejects_bad_password(client):
    resp = login(client, "zaki", "nope")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "AuthenticationError"


def test_me_requires_login(client):
    assert client.get("/api/me").status_code == 401


def test_me_after_login(staff):
    data = staff.get("/api/me").get_json()["data"]
    assert data == {"user_id": 42, "name": "Zaki", "role": "staff", "position": "Staf TU"}


def test_logout_clears_session(staff):
    staff.post("/api/logout")
    assert staff.get("/api/me").status_code == 401


def test_checkin_stores_selfie(staff):
    resp = post_checkin(staff)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["status"] == "ON_TIME"
    assert data["status_label"] == "Hadir"
    assert data["checkin_time"] == "2026-01-07T06:00:00"
    assert data["selfie_photo"].startswith("/uploads/selfie_photos/42_")

    photo = staff.get(data["selfie_photo"])
    assert photo.status_code == 200
    assert photo.mimetype == "image/jpeg"


def test_checkin_twice(staff):
    post_checkin(staff)
    resp = post_checkin(staff)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "DuplicateCheckInError"


def test_checkin_out_of_range(staff):
    resp = post_checkin(staff, lat="-6.3000", lon="106.9000")
    assert resp.status_code == 422
    assert resp.get_json()["error"] == "OutOfRangeError"


def test_checkin_requires_numeric_coordinates(staff):
    resp = post_checkin(staff, lat="abc")
    assert resp.status_code == 400


def test_checkin_accepts_json_with_photo_reference(staff):
    resp = staff.post(
        "/api/attendance/checkin",
        json={"latitude": LAT, "longitude": LON, "selfie_photo": "/uploads/selfie_photos/existing.jpg"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["selfie_photo"] == "/uploads/selfie_photos/existing.jpg"


def test_checkout_flow(staff, clock):
    assert staff.post("/api/attendance/checkout", json={"latitude": LAT, "longitude": LON}).status_code == 409

    post_checkin(staff)
    clock.now = datetime(2026, 1, 7, 15, 0)
    resp = staff.post("/api/attendance/checkout", json={"latitude": LAT, "longitude": LON})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["checkout_time"] == "2026-01-07T15:00:00"

    today = staff.get("/api/attendance/today-status").get_json()["data"]
    assert today["checkout_time"] == "2026-01-07T15:00:00"
    assert len(staff.get("/api/attendance/history").get_json()["data"]) == 1


def test_holiday_blocks_checkin(admin, client):
    resp = admin.post("/api/admin/holidays", json={"date": "2026-01-07", "description": "Libur"})
    assert resp.status_code == 201

    admin.post("/api/logout")
    login(client, "zaki", "staff123")
    resp = post_checkin(client)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "HolidayBlockedError"


def test_staff_cannot_use_admin_routes(staff):
    assert staff.get("/api/admin/attendance/recap").status_code == 403


def test_admin_routes_require_login(client):
    assert client.get("/api/admin/geofence").status_code == 401


def test_admin_cannot_check_in(admin):
    assert post_checkin(admin).status_code == 403


def test_admin_geofence(admin):
    resp = admin.put("/api/admin/geofence", json={"school_latitude": 1, "school_longitude": 2, "tolerance_radius": -5})
    assert resp.status_code == 400

    resp = admin.put(
        "/api/admin/geofence", json={"school_latitude": -7.8651, "school_longitude": 111.462, "tolerance_radius": 100}
    )
    assert resp.status_code == 200
    assert admin.get("/api/admin/geofence").get_json()["data"]["tolerance_radius"] == 100.0


def test_admin_holidays_crud(admin):
    hid = admin.post("/api/admin/holidays", json={"date": "2026-03-20", "description": "Idul Fitri"}).get_json()[
        "data"
    ]["id"]
    assert [h["date"] for h in admin.get("/api/admin/holidays").get_json()["data"]] == ["2026-03-20"]

    assert admin.delete(f"/api/admin/holidays/{hid}").status_code == 200
    assert admin.delete(f"/api/admin/holidays/{hid}").status_code == 404
    assert admin.post("/api/admin/holidays", json={"date": "20-03-2026", "description": "x"}).status_code == 400


def test_admin_reports(admin, container):
    container.attendance_service.check_in(
        42, latitude=float(LAT), longitude=float(LON), selfie_photo=None, now=datetime(2026, 1, 7, 7, 30)
    )

    recap = admin.get("/api/admin/attendance/recap?status=late&start_date=2026-01-01").get_json()["data"]
    assert [(r["staff_name"], r["status"]) for r in recap] == [("Zaki", "LATE")]

    assert admin.get("/api/admin/attendance/recap?status=BOLOS").status_code == 400
    assert admin.get("/api/admin/attendance/recap?start_date=yesterday").status_code == 400

    staff_history = admin.get("/api/admin/staff/42/attendance").get_json()["data"]
    assert staff_history[0]["date"] == "2026-01-07"
    assert admin.get("/api/admin/staff/999/attendance").status_code == 404

    today = admin.get("/api/admin/attendance/today").get_json()["data"]
    assert [r["staff_id"] for r in today] == [42]


def test_admin_recap_csv(admin, container):
    container.attendance_service.check_in(
        42, latitude=float(LAT), longitude=float(LON), selfie_photo=None, now=datetime(2026, 1, 7, 6, 10)
    )

    resp = admin.get("/api/admin/attendance/recap.csv?start_date=2026-01-01&end_date=2026-01-31")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "rekap_presensi_20260101_20260131.csv" in resp.headers["Content-Disposition"]
    text = resp.data.decode("utf-8-sig").splitlines()
    assert text[0] == "work_date,staff_id,full_name,username,check_in,check_out,status,latitude,longitude"
    assert text[1].startswith("2026-01-07,42,Zaki,zaki,06:10,-,Hadir,")


def test_admin_live(admin, container, clock):
    container.attendance_service.check_in(
        42, latitude=float(LAT), longitude=float(LON), selfie_photo=None, now=clock.now
    )
    clock.now = datetime(2026, 1, 7, 6, 5)

    items = admin.get("/api/admin/attendance/live").get_json()["data"]
    assert items == [{"tendik_name": "Zaki", "action": "checkin", "time": "2026-01-07T06:00:00", "photo": None}]

    clock.now = datetime(2026, 1, 7, 6, 30)
    assert admin.get("/api/admin/attendance/live").get_json()["data"] == []
    assert len(admin.get("/api/admin/attendance/live?minutes=45").get_json()["data"]) == 1
    assert admin.get("/api/admin/attendance/live?minutes=-1").status_code == 400


def stored_selfies(container) -> list:
    folder = container.photo_store.root / "selfie_photos"
    return sorted(folder.iterdir()) if folder.exists() else []


def test_rejected_checkin_leaves_no_selfie(staff, container):
    resp = post_checkin(staff, lat="-6.3000", lon="106.9000")

    assert resp.status_code == 422
    assert stored_selfies(container) == []


def test_duplicate_checkin_keeps_only_first_selfie(staff, container):
    first = post_checkin(staff).get_json()["data"]["selfie_photo"]
    assert post_checkin(staff).status_code == 409

    assert [p.name for p in stored_selfies(container)] == [first.rsplit("/", 1)[1]]


def test_checkout_selfie_is_checked_but_not_stored(staff, container, clock):
    post_checkin(staff)
    clock.now = datetime(2026, 1, 7, 15, 0)

    bad = staff.post(
        "/api/attendance/checkout",
        data={"latitude": LAT, "longitude": LON, "selfie": (io.BytesIO(b"not a photo"), "selfie.png")},
        content_type="multipart/form-data",
    )
    assert bad.status_code == 400

    resp = staff.post(
        "/api/attendance/checkout",
        data={"latitude": LAT, "longitude": LON, "selfie": (selfie(), "selfie.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert len(stored_selfies(container)) == 1
