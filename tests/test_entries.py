# tests for entries router: record, list, edit and delete daily entries
# one entry per day: posting an existing date replaces it

from tests.conftest import PROFILE_ID, days_ago, entry_payload

BASE = f"/profiles/{PROFILE_ID}/entries"


class TestCreateEntry:
    """record a day"""

    async def test_create_entry(self, client, mock_db):
        resp = await client.post(BASE, json=entry_payload(
            days_ago(0),
            mood=4,
            symptoms=[{"name": "Ansia", "intensity": 5}],
            triggers=[{"name": "Stress lavorativo", "category": "work"}],
            activities=[{"type": "sleep", "value": 7.5, "unit": "ore"}],
            screenTime=120,
            dayRating=7,
            notes="calm day",
        ))
        assert resp.status_code == 201
        data = resp.json()
        assert data["id"]
        assert data["date"] == days_ago(0)
        assert data["mood"]["level"] == 4
        assert data["screenTime"] == 120
        assert data["dayRating"] == 7
        assert "createdAt" in data
        assert "updatedAt" in data
        assert data["weather"] is None
        assert len(mock_db.entries._data) == 1

    async def test_same_date_replaces(self, client):
        await client.post(BASE, json=entry_payload(days_ago(0), mood=1))
        await client.post(BASE, json=entry_payload(days_ago(0), mood=5))

        resp = await client.get(BASE)
        data = resp.json()
        assert len(data) == 1
        assert data[0]["mood"]["level"] == 5

    async def test_invalid_mood(self, client):
        resp = await client.post(BASE, json=entry_payload(days_ago(0), mood=6))
        assert resp.status_code == 422

    async def test_invalid_symptom_intensity(self, client):
        resp = await client.post(BASE, json=entry_payload(
            days_ago(0), symptoms=[{"name": "Ansia", "intensity": 8}],
        ))
        assert resp.status_code == 422

    async def test_invalid_date_format(self, client):
        resp = await client.post(BASE, json=entry_payload("15/06/2025"))
        assert resp.status_code == 422

    async def test_impossible_date(self, client):
        resp = await client.post(BASE, json=entry_payload("2025-02-30"))
        assert resp.status_code == 422

    async def test_invalid_profile_id(self, client):
        resp = await client.post("/profiles/bad%20id/entries", json=entry_payload(days_ago(0)))
        assert resp.status_code == 422


class TestListEntries:
    """list entries, optionally by date range"""

    async def test_list_ascending(self, client):
        for n in (0, 4, 2):
            await client.post(BASE, json=entry_payload(days_ago(n)))
        resp = await client.get(BASE)
        assert resp.status_code == 200
        dates = [e["date"] for e in resp.json()]
        assert dates == [days_ago(4), days_ago(2), days_ago(0)]

    async def test_list_in_range(self, client):
        for n in range(6):
            await client.post(BASE, json=entry_payload(days_ago(n)))
        resp = await client.get(BASE, params={"start": days_ago(3), "end": days_ago(1)})
        dates = [e["date"] for e in resp.json()]
        assert dates == [days_ago(3), days_ago(2), days_ago(1)]

    async def test_open_ended_range(self, client):
        for n in range(4):
            await client.post(BASE, json=entry_payload(days_ago(n)))
        resp = await client.get(BASE, params={"start": days_ago(1)})
        assert [e["date"] for e in resp.json()] == [days_ago(1), days_ago(0)]

    async def test_start_after_end(self, client):
        resp = await client.get(BASE, params={"start": days_ago(0), "end": days_ago(3)})
        assert resp.status_code == 400

    async def test_empty(self, client):
        resp = await client.get(BASE)
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_profiles_are_isolated(self, client):
        await client.post(BASE, json=entry_payload(days_ago(0)))
        resp = await client.get("/profiles/other_profile/entries")
        assert resp.json() == []


class TestEntryForDate:

    async def test_get_by_date(self, client):
        await client.post(BASE, json=entry_payload(days_ago(1), mood=2))
        resp = await client.get(f"{BASE}/{days_ago(1)}")
        assert resp.status_code == 200
        assert resp.json()["mood"]["level"] == 2

    async def test_missing_date(self, client):
        resp = await client.get(f"{BASE}/{days_ago(1)}")
        assert resp.status_code == 404


class TestUpdateEntry:

    async def test_patch(self, client):
        created = (await client.post(BASE, json=entry_payload(days_ago(0), mood=2, notes="meh"))).json()
        resp = await client.patch(f"{BASE}/{created['id']}", json={"mood": {"level": 4}, "dayRating": 8})
        assert resp.status_code == 200
        data = resp.json()
        assert data["mood"]["level"] == 4
        assert data["dayRating"] == 8
        assert data["notes"] == "meh"

    async def test_patch_unknown(self, client):
        resp = await client.patch(f"{BASE}/missing", json={"notes": "x"})
        assert resp.status_code == 404

    async def test_patch_invalid(self, client):
        created = (await client.post(BASE, json=entry_payload(days_ago(0)))).json()
        resp = await client.patch(f"{BASE}/{created['id']}", json={"dayRating": 11})
        assert resp.status_code == 422


class TestDeleteEntry:

    async def test_delete(self, client, mock_db):
        created = (await client.post(BASE, json=entry_payload(days_ago(0)))).json()
        resp = await client.delete(f"{BASE}/{created['id']}")
        assert resp.status_code == 200
        assert mock_db.entries._data == []
        assert (await client.get(BASE)).json() == []

    async def test_delete_unknown(self, client):
        resp = await client.delete(f"{BASE}/missing")
        assert resp.status_code == 404
