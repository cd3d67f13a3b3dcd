from typing import Optional

from pydantic import ValidationError

from vetcare.core.config import settings
from vetcare.core.exceptions import MalformedPersistedState
from vetcare.schemas.user import Identity

class IdentitySlot:
    """
    One persisted identity, stored under a fixed key inside a namespace.

    The namespace separates clients sharing a backend; the key name is the
    same for all of them.
    """

    def __init__(self, backend, namespace: str, key: str = None, ttl: Optional[int] = None):
        self.backend = backend
        self.key = f"{namespace}:{key or settings.SESSION_KEY}"
        self.ttl = ttl if ttl is not None else settings.SESSION_TTL_SECONDS

    async def read(self) -> Optional[Identity]:
        raw = await self.backend.get(self.key)
        if raw is None:
            return None
        try:
            return Identity.model_validate_json(raw)
        except ValidationError as exc:
            raise MalformedPersistedState(f"{self.key}: {exc.error_count()} validation error(s)") from exc

    async def write(self, identity: Identity):
        await self.backend.set(self.key, identity.to_json(), expire=self.ttl)

    async def clear(self):
        await self.backend.delete(self.key)
