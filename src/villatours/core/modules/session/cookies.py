from itsdangerous import BadSignature, TimestampSigner

from villatours.core.modules.session.models import SessionId


class SessionCookieSigner:
    """Signs session ids for the client-held `session` cookie.

    A cookie older than `max_age` seconds or with a bad signature is treated as absent.
    """

    def __init__(self, secret_key: str, max_age: int) -> None:
        self._signer = TimestampSigner(secret_key, salt="villatours.session")
        self._max_age = max_age

    def sign(self, session_id: SessionId) -> str:
        return self._signer.sign(session_id).decode("utf-8")

    def unsign(self, value: str) -> SessionId | None:
        try:
            raw = self._signer.unsign(value, max_age=self._max_age)
        except BadSignature:
            return None
        return SessionId(raw.decode("utf-8"))
