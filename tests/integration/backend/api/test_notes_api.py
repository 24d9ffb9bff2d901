"""
Integration Tests for the notes API.

Each test runs against the real application and a rolled-back database session.
"""

import io
import zipfile

from inkline.backend.models import Note

NOTES = "/api/v1/notes"


async def _create(client, headers, api, **fields):
    note = api.assert_success(await client.post(NOTES, headers=headers), 201)
    if fields:
        note = api.assert_success(
            await client.patch(f"{NOTES}/{note['id']}", json=fields, headers=headers)
        )
    return note


class TestAuthentication:
    async def test_missing_token(self, client, api):
        api.assert_error(await client.get(NOTES), 401, "AUTH_UNAUTHORIZED")

    async def test_invalid_token(self, client, api):
        response = await client.get(NOTES, headers={"Authorization": "Bearer nope"})
        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")


class TestCreateAndList:
    async def test_create_empty_note(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api)

        assert note["title"] == ""
        assert note["body"] == ""
        assert note["archived"] is False
        assert note["is_public"] is False
        assert note["user_id"] == "test-user-id"

    async def test_list_is_owner_scoped(self, client, make_headers, api):
        alice, bob = make_headers("alice"), make_headers("bob")
        await _create(client, alice, api, title="Alice's")

        assert api.assert_success(await client.get(NOTES, headers=bob)) == []
        listed = api.assert_success(await client.get(NOTES, headers=alice))
        assert [n["title"] for n in listed] == ["Alice's"]

    async def test_foreign_note_is_not_found(self, client, make_headers, api):
        note = await _create(client, make_headers("alice"), api)

        response = await client.get(f"{NOTES}/{note['id']}", headers=make_headers("bob"))

        api.assert_error(response, 404, "RES_NOT_FOUND")

    async def test_quota(self, client, db_session, auth_headers, api):
        db_session.add_all(Note(user_id="test-user-id") for _ in range(100))
        await db_session.flush()

        error = api.assert_error(
            await client.post(NOTES, headers=auth_headers), 409, "NOTE_QUOTA_EXCEEDED"
        )

        assert error["message"] == "You have reached the maximum of 100 notes."
        assert error["details"] == {"limit": 100}


class TestUpdate:
    async def test_partial_update(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api, title="Plan", body="<p>a</p>")

        updated = api.assert_success(
            await client.patch(f"{NOTES}/{note['id']}", json={"body": "<p>b</p>"}, headers=auth_headers)
        )

        assert updated["title"] == "Plan"
        assert updated["body"] == "<p>b</p>"

    async def test_body_over_cap_is_rejected(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api)

        response = await client.patch(
            f"{NOTES}/{note['id']}", json={"body": "x" * 4097}, headers=auth_headers
        )

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")

    async def test_body_at_cap_is_accepted(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api)

        response = await client.patch(
            f"{NOTES}/{note['id']}", json={"body": "x" * 4096}, headers=auth_headers
        )

        assert len(api.assert_success(response)["body"]) == 4096

    async def test_long_title_fails_validation(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api)

        response = await client.patch(
            f"{NOTES}/{note['id']}", json={"title": "t" * 256}, headers=auth_headers
        )

        api.assert_validation_error(response, "title")


class TestArchiveRestoreDelete:
    async def test_archive_and_restore(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api, title="Keep")

        archived = api.assert_success(
            await client.post(f"{NOTES}/archive", json={"ids": [note["id"]]}, headers=auth_headers)
        )
        assert archived[0]["archived"] is True
        assert archived[0]["updated_at"] == note["updated_at"]
        assert api.assert_success(await client.get(NOTES, headers=auth_headers)) == []

        listed = api.assert_success(
            await client.get(NOTES, params={"archived": "true"}, headers=auth_headers)
        )
        assert [n["id"] for n in listed] == [note["id"]]

        restored = api.assert_success(
            await client.post(f"{NOTES}/restore", json={"ids": [note["id"]]}, headers=auth_headers)
        )
        assert restored[0]["archived"] is False

    async def test_bulk_delete_reports_owned_ids(self, client, make_headers, api):
        alice, bob = make_headers("alice"), make_headers("bob")
        mine = await _create(client, alice, api)
        theirs = await _create(client, bob, api)

        result = api.assert_success(
            await client.post(
                f"{NOTES}/delete", json={"ids": [mine["id"], theirs["id"]]}, headers=alice
            )
        )

        assert result == {"deleted_ids": [mine["id"]]}
        api.assert_success(await client.get(f"{NOTES}/{theirs['id']}", headers=bob))

    async def test_empty_id_list_is_invalid(self, client, auth_headers, api):
        response = await client.post(f"{NOTES}/archive", json={"ids": []}, headers=auth_headers)
        api.assert_validation_error(response, "ids")

    async def test_delete_single(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api)

        response = await client.delete(f"{NOTES}/{note['id']}", headers=auth_headers)

        assert response.status_code == 204
        api.assert_error(
            await client.get(f"{NOTES}/{note['id']}", headers=auth_headers), 404
        )


class TestSharing:
    async def test_share_id_is_stable(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api)
        url = f"{NOTES}/{note['id']}/share"

        shared = api.assert_success(
            await client.post(url, json={"is_public": True}, headers=auth_headers)
        )
        hidden = api.assert_success(
            await client.post(url, json={"is_public": False}, headers=auth_headers)
        )
        reshared = api.assert_success(
            await client.post(url, json={"is_public": True}, headers=auth_headers)
        )

        assert shared["share_id"]
        assert hidden["is_public"] is False
        assert hidden["share_id"] == shared["share_id"]
        assert reshared["share_id"] == shared["share_id"]


class TestExport:
    async def test_zip_of_selected_notes(self, client, auth_headers, api):
        first = await _create(client, auth_headers, api, title="Groceries", body="milk")
        second = await _create(client, auth_headers, api, title="Groceries", body="eggs")
        await _create(client, auth_headers, api, title="Skipped")

        response = await client.post(
            f"{NOTES}/export",
            json={"ids": [first["id"], second["id"]], "filename": "archived_notes.zip"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="archived_notes.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            assert sorted(archive.namelist()) == ["Groceries (2).txt", "Groceries.txt"]
            assert archive.read("Groceries.txt").decode() == "Title: Groceries\n\nmilk"

    async def test_bad_filename(self, client, auth_headers, api):
        note = await _create(client, auth_headers, api)
        response = await client.post(
            f"{NOTES}/export",
            json={"ids": [note["id"]], "filename": "../evil.sh"},
            headers=auth_headers,
        )
        api.assert_validation_error(response, "filename")
