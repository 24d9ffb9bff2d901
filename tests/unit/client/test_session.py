"""
Unit Tests for the session store and identities.
"""

import pytest
from jose import jwt

from inkline.backend.core.exceptions import AuthenticationError
from inkline.client.session import Identity, SessionStore


class TestIdentity:
    def test_from_token_reads_subject(self):
        token = jwt.encode({"sub": "alice"}, "any-key", algorithm="HS256")
        identity = Identity.from_token(token)
        assert identity.user_id == "alice"
        assert identity.access_token == token

    def test_malformed_token(self):
        with pytest.raises(AuthenticationError):
            Identity.from_token("not-a-token")

    def test_token_without_subject(self):
        token = jwt.encode({"name": "alice"}, "any-key", algorithm="HS256")
        with pytest.raises(AuthenticationError, match="no subject"):
            Identity.from_token(token)


class TestSessionStore:
    def test_require_without_identity(self):
        with pytest.raises(AuthenticationError, match="Not signed in"):
            SessionStore().require()

    def test_listeners_see_changes(self, identity):
        store = SessionStore()
        seen = []
        store.subscribe(seen.append)

        store.sign_in(identity)
        store.sign_out()

        assert seen == [identity, None]
        assert store.current is None

    def test_unsubscribe(self, identity):
        store = SessionStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()

        store.sign_in(identity)

        assert seen == []

    def test_sign_out_when_signed_out_is_silent(self):
        store = SessionStore()
        seen = []
        store.subscribe(seen.append)

        store.sign_out()

        assert seen == []
