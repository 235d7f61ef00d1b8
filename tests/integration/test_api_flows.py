import pytest
from httpx import AsyncClient
from tests.support import COMPANY_ID


async def create_exercise(client: AsyncClient):
    module = await client.post(f"/companies/{COMPANY_ID}/modules", json={"title": "Fire safety"})
    module_id = module.json()["data"]["id"]
    exercise = await client.post(f"/modules/{module_id}/exercises", json={"question": "Oil fire?"})
    return module_id, exercise.json()["data"]["id"]


class TestModuleIntegration:
    """Integration tests for module endpoints"""

    @pytest.mark.asyncio
    async def test_create_and_list_modules(self, client: AsyncClient):
        """Test modules are appended and listed in order"""
        for title in ("Intro", "Advanced"):
            response = await client.post(f"/companies/{COMPANY_ID}/modules", json={"title": title})
            assert response.status_code == 200
            assert response.json()["success"] is True

        response = await client.get(f"/companies/{COMPANY_ID}/modules")
        assert response.status_code == 200
        assert [(m["title"], m["order"]) for m in response.json()] == [("Intro", 0), ("Advanced", 1)]

    @pytest.mark.asyncio
    async def test_reorder_module(self, client: AsyncClient):
        ids = []
        for title in ("A", "B", "C"):
            response = await client.post(f"/companies/{COMPANY_ID}/modules", json={"title": title})
            ids.append(response.json()["data"]["id"])

        response = await client.put(f"/companies/{COMPANY_ID}/modules/{ids[2]}/order", json={"new_index": 0})
        assert response.status_code == 200

        listed = (await client.get(f"/companies/{COMPANY_ID}/modules")).json()
        assert [m["title"] for m in listed] == ["C", "A", "B"]

    @pytest.mark.asyncio
    async def test_negative_index_is_rejected(self, client: AsyncClient, module):
        response = await client.put(f"/companies/{COMPANY_ID}/modules/{module.id}/order", json={"new_index": -1})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_exam_lock_cycle(self, client: AsyncClient):
        exam = await client.post(f"/companies/{COMPANY_ID}/modules", json={"title": "Final", "type": "exam"})
        exam_id = exam.json()["data"]["id"]

        unlocked = await client.post(f"/companies/{COMPANY_ID}/modules/{exam_id}/unlock")
        assert unlocked.json()["data"]["is_unlocked"] is True

        locked = await client.post(f"/companies/{COMPANY_ID}/modules/{exam_id}/lock")
        assert locked.json()["data"]["is_unlocked"] is False

    @pytest.mark.asyncio
    async def test_unlocking_a_module_is_a_bad_request(self, client: AsyncClient, module):
        response = await client.post(f"/companies/{COMPANY_ID}/modules/{module.id}/unlock")

        assert response.status_code == 400
        assert response.json()["detail"]["reason"] == "invalid_operation"

    @pytest.mark.asyncio
    async def test_delete_missing_module(self, client: AsyncClient):
        response = await client.delete(f"/companies/{COMPANY_ID}/modules/missing")

        assert response.status_code == 404
        assert response.json()["detail"]["reason"] == "not_found"


class TestAlternativeIntegration:
    """Integration tests for the correct-alternative flow"""

    @pytest.mark.asyncio
    async def test_correct_alternative_flow(self, client: AsyncClient):
        """Test create -> mark correct -> delete keeps exactly one correct alternative"""
        _, exercise_id = await create_exercise(client)
        url = f"/exercises/{exercise_id}/alternatives"

        water = (await client.post(url, json={"content": "Water"})).json()["data"]
        assert water["is_correct"] is True

        foam = (await client.post(url, json={"content": "Foam"})).json()["data"]
        assert foam["is_correct"] is False

        response = await client.patch(f"{url}/{foam['id']}", json={"is_correct": True})
        assert response.status_code == 200

        listed = (await client.get(url)).json()
        assert [(a["content"], a["is_correct"]) for a in listed] == [("Water", False), ("Foam", True)]

        response = await client.delete(f"{url}/{foam['id']}")
        assert response.status_code == 200

        listed = (await client.get(url)).json()
        assert [(a["content"], a["is_correct"], a["order"]) for a in listed] == [("Water", True, 0)]

    @pytest.mark.asyncio
    async def test_conflicts(self, client: AsyncClient):
        _, exercise_id = await create_exercise(client)
        url = f"/exercises/{exercise_id}/alternatives"
        water = (await client.post(url, json={"content": "Water"})).json()["data"]

        response = await client.delete(f"{url}/{water['id']}")
        assert response.status_code == 409
        assert response.json()["detail"]["reason"] == "last_alternative"

        await client.post(url, json={"content": "Foam"})
        response = await client.patch(f"{url}/{water['id']}", json={"is_correct": False})
        assert response.status_code == 409
        assert response.json()["detail"]["reason"] == "last_correct_alternative"

    @pytest.mark.asyncio
    async def test_reorder_alternative(self, client: AsyncClient):
        _, exercise_id = await create_exercise(client)
        url = f"/exercises/{exercise_id}/alternatives"
        ids = [(await client.post(url, json={"content": c})).json()["data"]["id"] for c in ("A", "B", "C")]

        response = await client.put(f"{url}/{ids[0]}/order", json={"new_index": 10})
        assert response.status_code == 200

        listed = (await client.get(url)).json()
        assert [a["content"] for a in listed] == ["B", "C", "A"]

    @pytest.mark.asyncio
    async def test_update_missing_alternative(self, client: AsyncClient):
        _, exercise_id = await create_exercise(client)

        response = await client.patch(f"/exercises/{exercise_id}/alternatives/missing", json={"content": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_null_content_is_rejected(self, client: AsyncClient):
        _, exercise_id = await create_exercise(client)
        url = f"/exercises/{exercise_id}/alternatives"
        water = (await client.post(url, json={"content": "Water"})).json()["data"]

        response = await client.patch(f"{url}/{water['id']}", json={"content": None})
        assert response.status_code == 422

        listed = (await client.get(url)).json()
        assert [a["content"] for a in listed] == ["Water"]


class TestExerciseIntegration:

    @pytest.mark.asyncio
    async def test_update_and_delete_exercise(self, client: AsyncClient):
        module_id, exercise_id = await create_exercise(client)

        response = await client.patch(
            f"/modules/{module_id}/exercises/{exercise_id}", json={"image_layout": "carousel", "weight": 2}
        )
        assert response.status_code == 200
        assert response.json()["data"]["image_layout"] == "carousel"

        response = await client.delete(f"/modules/{module_id}/exercises/{exercise_id}")
        assert response.status_code == 200
        assert (await client.get(f"/modules/{module_id}/exercises")).json() == []

    @pytest.mark.asyncio
    async def test_weight_must_be_positive(self, client: AsyncClient, module):
        response = await client.post(f"/modules/{module.id}/exercises", json={"question": "Q", "weight": 0})
        assert response.status_code == 422


class TestPermissions:
    """Members can read but not write"""

    @pytest.fixture
    def current_user(self, member_user):
        return member_user

    @pytest.mark.asyncio
    async def test_member_can_list(self, client: AsyncClient, module):
        response = await client.get(f"/companies/{COMPANY_ID}/modules")
        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_member_cannot_create(self, client: AsyncClient):
        response = await client.post(f"/companies/{COMPANY_ID}/modules", json={"title": "Nope"})
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_member_cannot_delete_alternatives(self, client: AsyncClient, exercise, make_alternatives):
        a, b = make_alternatives("A", "B")

        response = await client.delete(f"/exercises/{exercise.id}/alternatives/{a.id}")
        assert response.status_code == 403
