"""Student endpoint behavior tests."""

import pytest
from httpx import AsyncClient

from school_api.config import Settings
from school_api.database import Database
from school_api.dependencies import _service_manager


@pytest.mark.asyncio
async def test_list_students_empty(client: AsyncClient) -> None:
    response = await client.get("/api/student")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_add_delete_renumbers(client: AsyncClient) -> None:
    response = await client.post("/api/addstudent", json={"name": "Alice", "rollNo": "R1", "class": "5A"})
    assert response.status_code == 200
    assert response.json() == {"message": "Student added successfully"}

    response = await client.post("/api/addstudent", json={"name": "Bob", "rollNo": "R2", "class": "5B"})
    assert response.status_code == 200

    rows = (await client.get("/api/student")).json()
    assert sorted(rows, key=lambda r: r["id"]) == [
        {"id": 1, "name": "Alice", "roll_number": "R1", "class": "5A"},
        {"id": 2, "name": "Bob", "roll_number": "R2", "class": "5B"},
    ]

    response = await client.delete("/api/student/1")
    assert response.status_code == 200
    assert response.json() == {"message": "Student deleted successfully"}

    rows = (await client.get("/api/student")).json()
    assert rows == [{"id": 1, "name": "Bob", "roll_number": "R2", "class": "5B"}]


@pytest.mark.asyncio
async def test_delete_missing_student_still_succeeds(client: AsyncClient) -> None:
    await client.post("/api/addstudent", json={"name": "Alice", "rollNo": "R1", "class": "5A"})

    response = await client.delete("/api/student/42")
    assert response.status_code == 200
    assert response.json() == {"message": "Student deleted successfully"}

    rows = (await client.get("/api/student")).json()
    assert [row["id"] for row in rows] == [1]


@pytest.mark.asyncio
async def test_ids_dense_after_mixed_operations(client: AsyncClient) -> None:
    for n in range(1, 6):
        await client.post("/api/addstudent", json={"name": f"s{n}", "rollNo": f"R{n}", "class": "6C"})

    for record_id in (5, 1, 2):
        assert (await client.delete(f"/api/student/{record_id}")).status_code == 200

    rows = sorted((await client.get("/api/student")).json(), key=lambda r: r["id"])
    assert [row["id"] for row in rows] == [1, 2]
    assert [row["name"] for row in rows] == ["s2", "s4"]


@pytest.mark.asyncio
async def test_add_student_missing_field_stored_as_null(client: AsyncClient) -> None:
    response = await client.post("/api/addstudent", json={"name": "Alice", "class": "5A"})
    assert response.status_code == 200
    assert response.json() == {"message": "Student added successfully"}

    rows = (await client.get("/api/student")).json()
    assert rows == [{"id": 1, "name": "Alice", "roll_number": None, "class": "5A"}]


@pytest.mark.asyncio
async def test_add_student_empty_body(client: AsyncClient) -> None:
    response = await client.post("/api/addstudent", json={})
    assert response.status_code == 200

    rows = (await client.get("/api/student")).json()
    assert rows == [{"id": 1, "name": None, "roll_number": None, "class": None}]


@pytest.mark.asyncio
async def test_delete_student_non_integer_id(client: AsyncClient) -> None:
    response = await client.delete("/api/student/abc")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_store_failure_is_generic_500(client: AsyncClient, database: Database) -> None:
    await database.drop_tables()

    response = await client.post("/api/addstudent", json={"name": "Alice", "rollNo": "R1", "class": "5A"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to add student"}

    response = await client.delete("/api/student/1")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to delete student"}

    response = await client.get("/api/student")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch students"}


@pytest.mark.asyncio
async def test_distinct_error_status(client: AsyncClient, database: Database) -> None:
    _service_manager.initialize(Settings(DISTINCT_ERROR_STATUS=True))
    await database.drop_tables()

    # A missing table surfaces as an OperationalError, classified as connectivity.
    response = await client.post("/api/addstudent", json={"name": "Alice", "rollNo": "R1", "class": "5A"})
    assert response.status_code == 503
    assert response.json() == {"error": "Failed to add student"}
