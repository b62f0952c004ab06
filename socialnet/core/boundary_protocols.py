"""Boundary Protocols — contracts between the services and their external collaborators.

Invariants:
    - Services never import a concrete transport (SMTP, cookies, HTTP probing)
    - All IO collaborators accessed through Protocol types
    - Implementations provided by the shell (api/, infrastructure/) via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - LoginMail is a frozen value: the mailer receives the secret, never the hash
"""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class LoginMail:
    """Everything the mail transport needs to deliver a magic link."""
    recipient: str
    username: str
    request_id: UUID
    secret: str
    complete_link: str


class LoginMailer(Protocol):
    """Out-of-band delivery of login secrets. Delivery failure is the transport's concern."""
    async def send_login(self, mail: LoginMail) -> None: ...


class TokenStore(Protocol):
    """Client-side holder of the bearer token across visits."""
    async def save(self, token: str) -> None: ...
    async def load(self) -> str | None: ...
    async def clear(self) -> None: ...


class MediaProbe(Protocol):
    """Determines the MIME type served at a media URL."""
    async def content_type(self, url: str) -> str | None: ...
