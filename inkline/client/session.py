"""
Session Store.

Holds the signed-in identity and notifies subscribers when it changes.
Components receive the store they should use; nothing reads a global.
"""

from collections.abc import Callable
from dataclasses import dataclass

from jose import JWTError, jwt

from inkline.backend.core.exceptions import AuthenticationError
from inkline.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """An authenticated user as far as the client is concerned."""

    user_id: str
    access_token: str

    @classmethod
    def from_token(cls, token: str) -> "Identity":
        """
        Build an identity from a bearer token issued by the identity provider.

        The signature is checked by the backend on every request; the client
        only reads the subject.

        Raises:
            AuthenticationError: If the token is malformed or has no subject
        """
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError as e:
            raise AuthenticationError("Malformed access token") from e
        subject = claims.get("sub")
        if not subject:
            raise AuthenticationError("Access token has no subject")
        return cls(user_id=str(subject), access_token=token)


SessionListener = Callable[[Identity | None], None]


class SessionStore:
    """
    Current identity with a single subscription point.

    Usage:
        store = SessionStore()
        unsubscribe = store.subscribe(lambda identity: ...)
        store.sign_in(Identity.from_token(token))
    """

    def __init__(self, identity: Identity | None = None) -> None:
        self._identity = identity
        self._listeners: list[SessionListener] = []

    @property
    def current(self) -> Identity | None:
        return self._identity

    def require(self) -> Identity:
        """
        Return the current identity.

        Raises:
            AuthenticationError: If nobody is signed in
        """
        if self._identity is None:
            raise AuthenticationError("Not signed in")
        return self._identity

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, identity: Identity) -> None:
        self._identity = identity
        log_with_source(logger, "client", "info", "Signed in", user_id=identity.user_id)
        self._emit()

    def sign_out(self) -> None:
        if self._identity is None:
            return
        log_with_source(logger, "client", "info", "Signed out", user_id=self._identity.user_id)
        self._identity = None
        self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self._identity)
