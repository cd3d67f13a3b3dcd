from dataclasses import dataclass
from typing import Optional

from vetcare.core.exceptions import AuthError, InvalidCredentials, MalformedPersistedState, StorageUnavailable, Unauthenticated
from vetcare.core.logger import get_logger
from vetcare.schemas.auth import LoginRequest
from vetcare.schemas.user import Identity
from vetcare.services.directory import UserDirectory
from vetcare.services.identity_slot import IdentitySlot

log = get_logger("session")

@dataclass(frozen=True)
class Session:
    identity: Optional[Identity] = None
    loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

class SessionStore:
    """
    Who is logged in for one client.

    Build one per client, call ``restore()`` once, then change it only
    through ``login()`` and ``logout()``. After awaiting ``login()`` callers
    should read ``current()`` again instead of reusing an older snapshot.
    """

    def __init__(self, slot: IdentitySlot, directory: UserDirectory):
        self.slot = slot
        self.directory = directory
        self._identity: Optional[Identity] = None
        self._loading = False

    def current(self) -> Session:
        return Session(identity=self._identity, loading=self._loading)

    def require_identity(self) -> Identity:
        if self._identity is None:
            raise Unauthenticated("no identity in session")
        return self._identity

    async def restore(self) -> Session:
        try:
            self._identity = await self.slot.read()
        except MalformedPersistedState as exc:
            log.warning(f"Discarding malformed persisted identity ({exc})")
            self._identity = None
        except StorageUnavailable as exc:
            log.error(f"Could not read persisted identity: {exc.reason}")
            self._identity = None
        return self.current()

    async def login(self, credentials: LoginRequest) -> Identity:
        self._loading = True
        try:
            record = await self.directory.authenticate(credentials.email, credentials.password)
            if record is None:
                raise InvalidCredentials("no matching user")
            identity = record.to_identity()
            await self.slot.write(identity)
        except AuthError as exc:
            log.warning(f"Login failed for {credentials.email}: {exc.kind} {exc.reason}".rstrip())
            raise
        finally:
            self._loading = False

        self._identity = identity
        log.info(f"Logged in {identity.email} as {identity.role.value}")
        return identity

    async def logout(self):
        self._identity = None
        await self.slot.clear()
        log.info("Session closed")
