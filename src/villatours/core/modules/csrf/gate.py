import asyncio
import secrets
from collections.abc import Awaitable

import structlog

from villatours.core.modules.csrf.models import Decision, GateContext, GateRequest, Outcome, Stage
from villatours.core.modules.session.cookies import SessionCookieSigner
from villatours.core.modules.session.models import SessionId
from villatours.core.modules.session.store import SessionStore
from villatours.errors import CsrfMismatchError, LogoutError, SessionUnavailableError
from villatours.utils import short_id

logger = structlog.get_logger(__name__)


def generate_csrf_token() -> str:
    return secrets.token_urlsafe(32)


class CsrfGate:
    """Session resolution and CSRF protection for the payment routes.

    Runs four named stages in order: resolve_session, exemption, verify, issue.
    Holds no mutable state of its own; every session read and write goes to the store
    and is bounded by `store_timeout` seconds.
    """

    def __init__(self, store: SessionStore, signer: SessionCookieSigner, store_timeout: float) -> None:
        self._store = store
        self._signer = signer
        self._store_timeout = store_timeout
        self.stages: tuple[Stage, ...] = (
            Stage("resolve_session", self._resolve_session),
            Stage("exemption", self._check_exemption),
            Stage("verify", self._verify_token),
            Stage("issue", self._issue_token),
        )

    async def process(self, request: GateRequest) -> GateContext:
        """Run the pipeline. Raises the rejecting stage's error, otherwise returns the context."""
        context = GateContext(request=request)
        for stage in self.stages:
            decision = await stage.handler(request, context)
            context.stages_run.append(stage.name)
            if decision.outcome is Outcome.REJECT:
                logger.info("payment_gate_rejected", stage=stage.name, method=request.method, path=request.path)
                if decision.error is None:
                    raise CsrfMismatchError
                raise decision.error
            if decision.outcome is Outcome.SHORT_CIRCUIT:
                break
        return context

    async def logout(self, context: GateContext) -> None:
        """Destroy the server-side session. Cookies may only be cleared after this returns."""
        if context.session is None:
            raise LogoutError("No session to clear")
        session_id = context.session.id
        try:
            await self._call(self._store.destroy(session_id))
        except SessionUnavailableError as exc:
            logger.warning("logout_failed", session=short_id(session_id))
            raise LogoutError from exc
        context.session = None
        logger.info("session_cleared", session=short_id(session_id))

    def sign_session_id(self, session_id: SessionId) -> str:
        return self._signer.sign(session_id)

    async def _call[T](self, awaitable: Awaitable[T]) -> T:
        try:
            async with asyncio.timeout(self._store_timeout):
                return await awaitable
        except TimeoutError as exc:
            raise SessionUnavailableError("Session store timed out") from exc

    # === Stages ===
    async def _resolve_session(self, request: GateRequest, context: GateContext) -> Decision:
        session_id = self._signer.unsign(request.session_cookie) if request.session_cookie else None
        try:
            session = await self._call(self._store.get(session_id)) if session_id else None
            if session is None:
                session = await self._call(self._store.create())
                context.session_created = True
        except SessionUnavailableError as exc:
            if request.requires_csrf:
                return Decision.reject(exc)
            logger.warning("payment_gate_no_session", path=request.path)
            return Decision.forward()
        context.session = session
        return Decision.forward()

    async def _check_exemption(self, request: GateRequest, context: GateContext) -> Decision:
        if request.requires_csrf:
            return Decision.forward()
        return Decision.short_circuit()

    async def _verify_token(self, request: GateRequest, context: GateContext) -> Decision:
        if not request.is_unsafe:
            return Decision.forward()
        stored = context.require_session().csrf_token
        presented = request.presented_token
        if not stored or not presented:
            return Decision.reject(CsrfMismatchError())
        if not secrets.compare_digest(presented.encode("utf-8"), stored.encode("utf-8")):
            return Decision.reject(CsrfMismatchError())
        return Decision.forward()

    async def _issue_token(self, request: GateRequest, context: GateContext) -> Decision:
        session = context.require_session()
        if session.csrf_token:
            return Decision.forward()

        token = await self._call(self._store.set_csrf_token_if_absent(session.id, generate_csrf_token()))
        if token is None:
            return Decision.reject(SessionUnavailableError("Session expired"))
        session.csrf_token = token
        context.issued_token = token
        logger.info("csrf_token_issued", session=short_id(session.id))
        return Decision.forward()
