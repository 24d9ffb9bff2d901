"""
Integration Tests for the profiles API.
"""


async def _share_one(client, headers, api):
    note = api.assert_success(await client.post("/api/v1/notes", headers=headers), 201)
    api.assert_success(
        await client.post(
            f"/api/v1/notes/{note['id']}/share", json={"is_public": True}, headers=headers
        )
    )


class TestOwnProfile:
    async def test_first_read_creates_private_profile(self, client, auth_headers, api):
        profile = api.assert_success(await client.get("/api/v1/profiles/me", headers=auth_headers))

        assert profile["id"] == "test-user-id"
        assert profile["username"] == "test-user-id"
        assert profile["is_public"] is False
        assert profile["public_notes_count"] == 0

    async def test_own_profile_by_id(self, client, auth_headers, api):
        profile = api.assert_success(
            await client.get("/api/v1/profiles/test-user-id", headers=auth_headers)
        )
        assert profile["id"] == "test-user-id"

    async def test_update(self, client, auth_headers, api):
        profile = api.assert_success(
            await client.patch(
                "/api/v1/profiles/me",
                json={"username": "ada", "bio": "Engineer", "is_public": True},
                headers=auth_headers,
            )
        )

        assert profile["username"] == "ada"
        assert profile["bio"] == "Engineer"
        assert profile["is_public"] is True
        assert profile["display_name"] is None

    async def test_bio_over_160_rejected(self, client, auth_headers, api):
        response = await client.patch(
            "/api/v1/profiles/me", json={"bio": "x" * 161}, headers=auth_headers
        )
        api.assert_validation_error(response, "bio")

    async def test_taken_username_conflicts(self, client, auth_headers, make_headers, api):
        await client.patch("/api/v1/profiles/me", json={"username": "ada"}, headers=auth_headers)

        response = await client.patch(
            "/api/v1/profiles/me", json={"username": "ada"}, headers=make_headers("someone-else")
        )

        api.assert_error(response, 409, "RES_CONFLICT")

    async def test_requires_auth(self, client, api):
        api.assert_error(await client.get("/api/v1/profiles/me"), 401)


class TestOtherProfiles:
    async def test_private_profile_is_not_found(self, client, auth_headers, make_headers, api):
        await client.get("/api/v1/profiles/me", headers=auth_headers)

        response = await client.get(
            "/api/v1/profiles/test-user-id", headers=make_headers("someone-else")
        )

        error = api.assert_error(response, 404, "RES_NOT_FOUND")
        assert error["message"] == "Profile not found."

    async def test_public_profile_counts_public_notes(
        self, client, auth_headers, make_headers, api
    ):
        await client.patch("/api/v1/profiles/me", json={"is_public": True}, headers=auth_headers)
        await _share_one(client, auth_headers, api)
        await client.post("/api/v1/notes", headers=auth_headers)

        profile = api.assert_success(
            await client.get("/api/v1/profiles/test-user-id", headers=make_headers("someone-else"))
        )

        assert profile["username"] == "test-user-id"
        assert profile["public_notes_count"] == 1
