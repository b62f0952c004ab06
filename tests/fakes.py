"""In-memory stand-ins for the IO collaborators (LoginMailer, TokenStore, MediaProbe)."""

from socialnet.core.boundary_protocols import LoginMail


class RecordingMailer:
    def __init__(self):
        self.sent: list[LoginMail] = []

    async def send_login(self, mail: LoginMail) -> None:
        self.sent.append(mail)


class MemoryTokenStore:
    def __init__(self, token: str | None = None):
        self.token = token

    async def save(self, token: str) -> None:
        self.token = token

    async def load(self) -> str | None:
        return self.token

    async def clear(self) -> None:
        self.token = None


class FakeMediaProbe:
    """Answers from a url -> content type table; unknown urls yield None."""

    def __init__(self, types: dict[str, str] | None = None):
        self.types = dict(types or {})
        self.probed: list[str] = []

    async def content_type(self, url: str) -> str | None:
        self.probed.append(url)
        return self.types.get(url)


class ExplodingDatabase:
    """A unit-of-work factory that fails the test if it is ever used."""

    def __init__(self):
        self.calls = 0

    def unit_of_work(self):
        self.calls += 1
        raise AssertionError("the store was accessed")
