"""
Integration Tests for the categories API.
"""

CATEGORIES = "/api/v1/categories"


class TestCategories:
    async def test_upsert_matches_case_insensitively(self, client, auth_headers, api):
        work = api.assert_success(
            await client.post(CATEGORIES, json={"name": "Work"}, headers=auth_headers)
        )
        again = api.assert_success(
            await client.post(CATEGORIES, json={"name": "  work "}, headers=auth_headers)
        )

        assert again["id"] == work["id"]
        listed = api.assert_success(await client.get(CATEGORIES, headers=auth_headers))
        assert [c["name"] for c in listed] == ["Work"]

    async def test_blank_name_rejected(self, client, auth_headers, api):
        response = await client.post(CATEGORIES, json={"name": "   "}, headers=auth_headers)
        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")

    async def test_assign_and_delete(self, client, auth_headers, api):
        category = api.assert_success(
            await client.post(CATEGORIES, json={"name": "Home"}, headers=auth_headers)
        )
        note = api.assert_success(await client.post("/api/v1/notes", headers=auth_headers), 201)
        assigned = api.assert_success(
            await client.patch(
                f"/api/v1/notes/{note['id']}",
                json={"category_id": category["id"]},
                headers=auth_headers,
            )
        )
        assert assigned["category_id"] == category["id"]
        assert assigned["updated_at"] == note["updated_at"]

        response = await client.delete(f"{CATEGORIES}/{category['id']}", headers=auth_headers)
        assert response.status_code == 204

        refreshed = api.assert_success(
            await client.get(f"/api/v1/notes/{note['id']}", headers=auth_headers)
        )
        assert refreshed["category_id"] is None

    async def test_foreign_category_cannot_be_assigned(self, client, make_headers, api):
        alice, bob = make_headers("alice"), make_headers("bob")
        category = api.assert_success(
            await client.post(CATEGORIES, json={"name": "Secret"}, headers=alice)
        )
        note = api.assert_success(await client.post("/api/v1/notes", headers=bob), 201)

        response = await client.patch(
            f"/api/v1/notes/{note['id']}", json={"category_id": category["id"]}, headers=bob
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")


class TestStats:
    async def test_insights(self, client, auth_headers, api):
        note = api.assert_success(await client.post("/api/v1/notes", headers=auth_headers), 201)
        await client.patch(
            f"/api/v1/notes/{note['id']}", json={"body": "one two three"}, headers=auth_headers
        )
        api.assert_success(await client.post("/api/v1/notes", headers=auth_headers), 201)

        stats = api.assert_success(await client.get("/api/v1/stats", headers=auth_headers))

        assert stats["total_notes"] == 2
        assert stats["note_limit"] == 100
        assert stats["remaining"] == 98
        assert stats["notes_this_month"] == 2
        assert stats["avg_words_this_month"] == 2
        assert stats["by_category"] == [{"name": "Unassigned", "value": 2}]
        assert len(stats["recent"]) == 2
