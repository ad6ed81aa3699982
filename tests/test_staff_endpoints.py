"""
Tests for staff endpoints and the bottle allowance reset.
"""
import asyncio

import pytest
from fastapi import HTTPException

from api.staffs.schemas import StaffCreate
from api.staffs.services import create_staff_service


def add_staff(db, doc_id, name, large=2, small=2):
    db.add("staff", {
        "name": name, "nameLower": name.lower(), "largeBottles": large, "smallBottles": small,
    }, doc_id=doc_id)


def test_create_staff(client, fake_db):
    """Test creating a staff member starts with a full allowance."""
    response = client.post("/staffs", json={"name": "  Omar "})

    assert response.status_code == 201
    staff = response.json()["data"]["item"]
    assert staff["name"] == "Omar"
    assert staff["largeBottles"] == 2
    assert staff["smallBottles"] == 2
    assert fake_db.doc("staff", staff["id"])["nameLower"] == "omar"


def test_create_staff_duplicate_name(client, fake_db):
    """Test staff names are unique regardless of case."""
    add_staff(fake_db, "s1", "Omar")

    response = client.post("/staffs", json={"name": "OMAR"})

    assert response.status_code == 400
    assert response.json()["message"] == "Staff member with this name already exists"


def test_create_staff_blank_name(client, fake_db):
    """Test a blank name fails validation."""
    response = client.post("/staffs", json={"name": "   "})

    assert response.status_code == 400
    assert response.json()["status"] == "fail"


def test_list_and_search_staff(client, fake_db):
    """Test listing is sorted by name and search is a partial match."""
    add_staff(fake_db, "s1", "Omar")
    add_staff(fake_db, "s2", "mona")
    add_staff(fake_db, "s3", "Ahmed")

    listed = client.get("/staffs").json()["data"]
    assert [member["name"] for member in listed] == ["Ahmed", "mona", "Omar"]

    found = client.get("/staffs/search?name=MA").json()["data"]
    assert [member["id"] for member in found] == ["s1"]


def test_get_staff_not_found(client, fake_db):
    """Test getting a missing staff member returns 404."""
    response = client.get("/staffs/missing")

    assert response.status_code == 404
    assert response.json()["message"] == "Staff member not found"


def test_rename_staff(client, fake_db):
    """Test renaming keeps the lowercase lookup key in sync."""
    add_staff(fake_db, "s1", "Omar")

    response = client.put("/staffs/s1", json={"name": "Omar K"})

    assert response.status_code == 200
    assert fake_db.doc("staff", "s1")["nameLower"] == "omar k"


def test_update_bottles(client, fake_db):
    """Test setting one counter leaves the other unchanged."""
    add_staff(fake_db, "s1", "Omar")

    response = client.patch("/staffs/s1/bottles", json={"largeBottles": 0})

    assert response.status_code == 200
    staff = response.json()["data"]["item"]
    assert staff["largeBottles"] == 0
    assert staff["smallBottles"] == 2


def test_update_bottles_out_of_range(client, fake_db):
    """Test counters above the allowance are rejected."""
    add_staff(fake_db, "s1", "Omar")

    response = client.patch("/staffs/s1/bottles", json={"largeBottles": 3})

    assert response.status_code == 400
    assert fake_db.doc("staff", "s1")["largeBottles"] == 2


def test_update_bottles_requires_a_counter(client, fake_db):
    """Test an empty bottles update is rejected."""
    add_staff(fake_db, "s1", "Omar")

    response = client.patch("/staffs/s1/bottles", json={})

    assert response.status_code == 400


def test_delete_staff(client, fake_db):
    """Test deleting a staff member."""
    add_staff(fake_db, "s1", "Omar")

    response = client.delete("/staffs/s1")

    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Staff member deleted successfully"
    assert fake_db.doc("staff", "s1") is None


def test_reset_bottles(client, fake_db):
    """Test the reset restores everyone's allowance and can be repeated."""
    add_staff(fake_db, "s1", "Omar", large=0, small=1)
    add_staff(fake_db, "s2", "Mona", large=1, small=0)

    first = client.post("/staffs/reset-bottles")
    second = client.post("/staffs/reset-bottles")

    assert first.status_code == second.status_code == 200
    for response in (first, second):
        counters = {m["id"]: (m["largeBottles"], m["smallBottles"]) for m in response.json()["data"]}
        assert counters == {"s1": (2, 2), "s2": (2, 2)}


def test_rename_staff_to_taken_name(client, fake_db):
    """Test renaming onto another member's name is rejected."""
    add_staff(fake_db, "s1", "Omar")
    add_staff(fake_db, "s2", "Mona")

    response = client.put("/staffs/s2", json={"name": "omar"})

    assert response.status_code == 400
    assert fake_db.doc("staff", "s2")["name"] == "Mona"


def test_rename_missing_staff(client, fake_db):
    """Test renaming a missing staff member returns 404."""
    response = client.put("/staffs/missing", json={"name": "Omar"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_concurrent_creates_with_same_name(fake_db):
    """Test only one of several simultaneous creates with one name succeeds."""
    results = await asyncio.gather(
        *(create_staff_service(StaffCreate(name=name)) for name in ("Omar", "omar", "OMAR")),
        return_exceptions=True,
    )

    created = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, HTTPException)]
    assert len(created) == 1
    assert len(rejected) == 2
    assert all(r.status_code == 400 for r in rejected)
    assert len(fake_db.store["staff"]) == 1
