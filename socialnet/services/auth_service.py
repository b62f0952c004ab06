"""Session Protocol — passwordless magic-link login built on the Entity Access Service.

Invariants:
    - start_login always returns a fresh request id, whether or not a user matched
    - A LoginSession is created (Pending) and a mail sent only when a user matched
    - complete_login only considers Pending sessions: a second completion always fails
    - Validated never reverts; the flip runs through apply_change with a Pending precondition
    - Every authentication failure is a bare False / None, with no reason attached
    - A bearer token resolves only for a Validated session

Design Decisions:
    - Identifier match is exact on email address or phone number
    - The secret reaches only the mailer; the store keeps SHA-256(secret + entropy)
    - Known gap: the matched path does an insert and a mail hand-off the unmatched path
      does not, so latency can distinguish the two
    - Known gap: repeated start_login calls accumulate Pending sessions (no expiry, no de-dup)
"""

import logging
import uuid
from uuid import UUID

from sqlalchemy import or_

from socialnet.core.boundary_protocols import LoginMail, LoginMailer, TokenStore
from socialnet.core.login_digest import (
    build_complete_link,
    compute_secret_hash,
    generate_entropy,
    generate_secret,
    secret_matches,
)
from socialnet.models.login_session import LoginSession
from socialnet.models.user import User
from socialnet.services.entity_service import EntityService

logger = logging.getLogger(__name__)

OWNER_RELATIONS = ("owner.followers", "owner.following", "owner.liked_posts")


def _is_pending(session: LoginSession) -> bool:
    return not session.validated


def _mark_validated(session: LoginSession) -> None:
    session.validated = True


class AuthService:
    """Start/complete magic-link logins and resolve bearer tokens."""

    def __init__(
        self,
        users: EntityService[User, int],
        sessions: EntityService[LoginSession, int],
        mailer: LoginMailer,
        public_base_url: str,
    ):
        self._users = users
        self._sessions = sessions
        self._mailer = mailer
        self._public_base_url = public_base_url

    async def start_login(self, identifier: str) -> UUID:
        """Begin a login for the user owning `identifier` (email or phone)."""
        request_id = uuid.uuid4()
        user = await self._users.first_where(
            or_(User.email_address == identifier, User.phone_number == identifier),
        )
        if user is None:
            logger.info(
                "Login started for unknown identifier",
                extra={"request_id": request_id},
            )
            return request_id

        secret = generate_secret()
        entropy = generate_entropy()
        session = LoginSession(
            owner=user,
            request_id=request_id,
            secret_hash=compute_secret_hash(secret, entropy),
            secret_entropy=entropy,
            bearer_token=uuid.uuid4(),
            validated=False,
        )
        await self._sessions.insert(session)
        await self._mailer.send_login(LoginMail(
            recipient=user.email_address,
            username=user.username,
            request_id=request_id,
            secret=secret,
            complete_link=build_complete_link(
                self._public_base_url, request_id, secret,
            ),
        ))
        logger.info(
            "Login started",
            extra={"request_id": request_id, "user_id": user.user_id},
        )
        return request_id

    async def complete_login(
        self, request_id: UUID, secret: str, token_store: TokenStore,
    ) -> bool:
        """Validate a Pending session; on success hand its bearer token to token_store."""
        session = await self._sessions.first_where(
            LoginSession.request_id == request_id,
            LoginSession.validated.is_(False),
        )
        if session is None or not secret_matches(
            secret, session.secret_entropy, session.secret_hash,
        ):
            logger.info(
                "Login completion rejected", extra={"request_id": request_id},
            )
            return False

        validated = await self._sessions.apply_change(
            session, _mark_validated, precondition=_is_pending,
        )
        if not validated:
            logger.info(
                "Login already completed concurrently",
                extra={"request_id": request_id},
            )
            return False

        await token_store.save(str(session.bearer_token))
        logger.info(
            "Login completed",
            extra={"request_id": request_id, "user_id": session.owner_id},
        )
        return True

    async def resolve_bearer(self, token: str | UUID | None) -> User | None:
        """Owning user of a Validated session, with follow/like relations loaded."""
        if token is None:
            return None
        if not isinstance(token, UUID):
            try:
                token = UUID(str(token))
            except ValueError:
                return None
        session = await self._sessions.first_where(
            LoginSession.validated.is_(True),
            LoginSession.bearer_token == token,
            relations=OWNER_RELATIONS,
        )
        return session.owner if session is not None else None

    async def authenticate(self, token_store: TokenStore) -> User | None:
        """Resolve whatever token the client currently holds."""
        return await self.resolve_bearer(await token_store.load())

    async def logout(self, token_store: TokenStore) -> None:
        """Forget the client's token. The session row itself is kept."""
        await token_store.clear()
