"""
User directories.

Every directory answers the same question: given an email and a password,
which user is this, if any? The password is checked by the directory and
never compared by the caller.
"""
import json
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from starlette.concurrency import run_in_threadpool

from vetcare.core.config import settings
from vetcare.core.exceptions import DirectoryUnavailable
from vetcare.core.logger import get_logger
from vetcare.core.security import get_password_hash, verify_password
from vetcare.core.utils import normalize_email
from vetcare.db.models import User
from vetcare.schemas.user import DirectoryRecord

log = get_logger("directory")


class UserDirectory(Protocol):
    async def authenticate(self, email: str, password: str) -> Optional[DirectoryRecord]:
        ...


def parse_record(payload) -> DirectoryRecord:
    try:
        return DirectoryRecord.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        log.error(f"Rejected directory record, invalid fields: {', '.join(fields)}")
        raise DirectoryUnavailable("malformed directory record") from exc


class MockUserDirectory:
    """In-memory users sharing one demo password."""

    def __init__(self, records: List[dict], password: str):
        self._password_hash = get_password_hash(password)
        self._records: Dict[str, DirectoryRecord] = {}
        for raw in records:
            record = parse_record(raw)
            self._records[normalize_email(record.email)] = record

    @classmethod
    def from_file(cls, path: Path, password: str) -> "MockUserDirectory":
        with open(path, encoding="utf-8") as fh:
            return cls(json.load(fh), password)

    async def authenticate(self, email: str, password: str) -> Optional[DirectoryRecord]:
        record = self._records.get(normalize_email(email))
        if record is None:
            return None
        # PBKDF2 is slow by design; keep it off the event loop
        if not await run_in_threadpool(verify_password, password, self._password_hash):
            return None
        return record


class SqlUserDirectory:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def authenticate(self, email: str, password: str) -> Optional[DirectoryRecord]:
        stmt = select(User).where(
            User.email == normalize_email(email),
            User.is_active == True,
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                user = result.scalars().first()
        except SQLAlchemyError as exc:
            raise DirectoryUnavailable(f"user lookup failed: {exc}") from exc

        if not user:
            return None
        if not await run_in_threadpool(verify_password, password, user.password_hash):
            return None

        return parse_record({
            "id": str(user.id),
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "image_url": user.image_url,
        })


class HttpUserDirectory:
    """
    Remote directory that validates credentials in a single call.

    ``POST {base_url}/auth/verify`` answers 200 with the user record when the
    credentials match, and 401 or 404 when they do not.
    """

    NO_MATCH_STATUSES = (401, 404)

    def __init__(self, base_url: str, timeout: float = 5.0, transport: httpx.AsyncBaseTransport = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def authenticate(self, email: str, password: str) -> Optional[DirectoryRecord]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    "/auth/verify", json={"email": normalize_email(email), "password": password}
                )
        except httpx.HTTPError as exc:
            raise DirectoryUnavailable(f"directory request failed: {exc!r}") from exc

        if response.status_code in self.NO_MATCH_STATUSES:
            return None
        if response.status_code != 200:
            raise DirectoryUnavailable(f"directory answered {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise DirectoryUnavailable("directory answered with invalid JSON") from exc
        return parse_record(payload)


def build_directory(kind: str = None) -> UserDirectory:
    kind = kind or settings.USER_DIRECTORY
    if kind == "mock":
        return MockUserDirectory.from_file(settings.MOCK_USERS_FILE, settings.MOCK_USER_PASSWORD)
    if kind == "sql":
        from vetcare.db.session import get_session_factory
        return SqlUserDirectory(get_session_factory())
    if kind == "http":
        if not settings.USER_DIRECTORY_URL:
            raise ValueError("USER_DIRECTORY_URL must be set for the http user directory")
        return HttpUserDirectory(settings.USER_DIRECTORY_URL, timeout=settings.USER_DIRECTORY_TIMEOUT)
    raise ValueError(f"Unknown user directory '{kind}'")
