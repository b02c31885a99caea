"""Records API — optimistic updates over HTTP.

Tests:
    - GET returns the record and its version
    - PATCH with current version -> 200 and version + 1
    - two admins at the same version: second gets 409 VERSION_CONFLICT payload
    - non-numeric or out-of-range version -> 400, record untouched
    - duplicate or null required field -> 409 CONSTRAINT_VIOLATION, never 503
    - payload id stripped: only the path record changes
    - deleted id -> 404 (409 in legacy mode)
    - secret user fields neither writable nor returned
    - unknown field / unknown kind -> 400
    - attendance verification endpoint
"""

from uuid import uuid4

import pytest
from sqlalchemy import update

from classtrack.config import Settings, get_settings
from classtrack.core.domain_types import EntityKind
from classtrack.infrastructure.sql_repository import SqlVersionedRepository
from classtrack.main import app
from classtrack.models.classroom import Classroom


async def _seed_classroom(test_db, name: str, version: int = 0) -> dict:
    room = await SqlVersionedRepository(test_db, EntityKind.CLASSROOM).create({"name": name})
    if version:
        await test_db.execute(
            update(Classroom.__table__)
            .where(Classroom.__table__.c.id == room["id"])
            .values(version=version),
        )
        await test_db.commit()
    return {**room, "version": version}


async def test_get_returns_record_with_version(client, test_db):
    room = await _seed_classroom(test_db, "Lab A", version=5)

    res = await client.get(f"/api/v1/records/classrooms/{room['id']}")

    assert res.status_code == 200
    assert res.json()["record"]["version"] == 5
    assert res.json()["record"]["name"] == "Lab A"


async def test_get_missing_record_404(client):
    res = await client.get(f"/api/v1/records/classrooms/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_patch_with_current_version_succeeds(client, test_db):
    room = await _seed_classroom(test_db, "Lab A", version=5)

    res = await client.patch(
        f"/api/v1/records/classrooms/{room['id']}",
        json={"name": "Lab B", "version": 5},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Classroom updated successfully"
    assert body["record"]["version"] == 6
    assert body["record"]["name"] == "Lab B"


async def test_second_admin_gets_conflict(client, test_db):
    room = await _seed_classroom(test_db, "Lab A", version=5)
    url = f"/api/v1/records/classrooms/{room['id']}"

    first = await client.patch(url, json={"capacity": 40, "version": 5})
    second = await client.patch(url, json={"capacity": 12, "version": 5})

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json() == {
        "message": "Classroom was updated by someone else. Refresh and try again.",
        "code": "VERSION_CONFLICT",
    }
    current = (await client.get(url)).json()["record"]
    assert (current["capacity"], current["version"]) == (40, 6)


@pytest.mark.parametrize("fields", [{"name": "Lab A"}, {"name": None}])
async def test_constraint_violation_is_client_error(client, test_db, fields):
    await _seed_classroom(test_db, "Lab A")
    room = await _seed_classroom(test_db, "Lab B", version=2)
    url = f"/api/v1/records/classrooms/{room['id']}"

    res = await client.patch(url, json={**fields, "version": 2})

    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "CONSTRAINT_VIOLATION"
    assert error["severity"] == "warning"
    current = (await client.get(url)).json()["record"]
    assert (current["name"], current["version"]) == ("Lab B", 2)


async def test_oversized_integer_field_is_400(client, test_db):
    room = await _seed_classroom(test_db, "Lab A")

    res = await client.patch(
        f"/api/v1/records/classrooms/{room['id']}",
        json={"capacity": 2**64, "version": 0},
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "CONSTRAINT_VIOLATION"


@pytest.mark.parametrize("version", ["abc", None, -1, 1.5, 2**64, "9" * 5000])
async def test_invalid_version_is_400_and_record_untouched(client, test_db, version):
    room = await _seed_classroom(test_db, "Lab A", version=5)
    url = f"/api/v1/records/classrooms/{room['id']}"

    res = await client.patch(url, json={"name": "Lab X", "version": version})

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_VERSION"
    current = (await client.get(url)).json()["record"]
    assert (current["name"], current["version"]) == ("Lab A", 5)


async def test_missing_version_is_400(client, test_db):
    room = await _seed_classroom(test_db, "Lab A")
    res = await client.patch(
        f"/api/v1/records/classrooms/{room['id']}", json={"name": "Lab X"},
    )
    assert res.status_code == 400


async def test_payload_id_is_stripped(client, test_db):
    c1 = await _seed_classroom(test_db, "C1", version=5)
    c2 = await _seed_classroom(test_db, "C2", version=5)

    res = await client.patch(
        f"/api/v1/records/classrooms/{c1['id']}",
        json={"id": str(c2["id"]), "name": "Lab C", "version": 5},
    )

    assert res.status_code == 200
    assert res.json()["record"]["id"] == str(c1["id"])
    untouched = (await client.get(f"/api/v1/records/classrooms/{c2['id']}")).json()["record"]
    assert (untouched["name"], untouched["version"]) == ("C2", 5)


async def test_deleted_record_is_404(client, test_db):
    room = await _seed_classroom(test_db, "Lab A")
    await SqlVersionedRepository(test_db, EntityKind.CLASSROOM).delete(room["id"])

    res = await client.patch(
        f"/api/v1/records/classrooms/{room['id']}", json={"name": "x", "version": 0},
    )

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_deleted_record_is_conflict_in_legacy_mode(client, test_db):
    app.dependency_overrides[get_settings] = lambda: Settings(
        occ_distinguish_not_found=False,
    )
    room = await _seed_classroom(test_db, "Lab A")
    await SqlVersionedRepository(test_db, EntityKind.CLASSROOM).delete(room["id"])

    res = await client.patch(
        f"/api/v1/records/classrooms/{room['id']}", json={"name": "x", "version": 0},
    )

    assert res.status_code == 409
    assert res.json()["code"] == "VERSION_CONFLICT"


async def test_user_secrets_not_writable_or_returned(client, test_db):
    users = SqlVersionedRepository(test_db, EntityKind.USER)
    user = await users.create({
        "first_name": "Ana", "last_name": "Cruz",
        "email": "ana@example.edu", "password_hash": "hash-1",
    })

    res = await client.patch(
        f"/api/v1/records/users/{user['id']}",
        json={"password_hash": "hash-2", "is_active": False, "version": 0},
    )

    assert res.status_code == 200
    record = res.json()["record"]
    assert "password_hash" not in record
    assert record["is_active"] is False
    assert (await users.get(user["id"]))["password_hash"] == "hash-1"


async def test_append_and_increment_over_http(client, test_db):
    room = await _seed_classroom(test_db, "Lab A")

    res = await client.patch(
        f"/api/v1/records/classrooms/{room['id']}",
        json={"version": 0, "append": {"equipment": ["projector"]}, "increment": {"capacity": 3}},
    )

    assert res.status_code == 200
    assert res.json()["record"]["equipment"] == ["projector"]
    assert res.json()["record"]["capacity"] == 3


async def test_unknown_field_is_400(client, test_db):
    room = await _seed_classroom(test_db, "Lab A")
    res = await client.patch(
        f"/api/v1/records/classrooms/{room['id']}", json={"colour": "red", "version": 0},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "UNKNOWN_FIELD"


async def test_unknown_kind_is_400(client):
    res = await client.patch(
        f"/api/v1/records/spaceships/{uuid4()}", json={"version": 0},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_verify_attendance_event(client, test_db):
    events = SqlVersionedRepository(test_db, EntityKind.ATTENDANCE_EVENT)
    event = await events.create({"status": "pending"})
    admin_id = uuid4()

    res = await client.post(
        f"/api/v1/records/attendance-events/{event['id']}/verify",
        json={"version": 0, "status": "verified", "verified_by": str(admin_id)},
    )

    assert res.status_code == 200
    record = res.json()["record"]
    assert record["status"] == "verified"
    assert record["verified_by"] == str(admin_id)
    assert record["version"] == 1


async def test_verify_attendance_rejects_bad_status(client, test_db):
    events = SqlVersionedRepository(test_db, EntityKind.ATTENDANCE_EVENT)
    event = await events.create({"status": "pending"})

    res = await client.post(
        f"/api/v1/records/attendance-events/{event['id']}/verify",
        json={"version": 0, "status": "approved", "verified_by": str(uuid4())},
    )

    assert res.status_code == 400
