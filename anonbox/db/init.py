"""Process-wide MongoDB/Beanie handle.

Initialized lazily on first use and reused by every later request in the same
process. There is no teardown; the client lives as long as the process.
"""

import asyncio
from typing import Any

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from anonbox.core.config import get_settings
from anonbox.core.logging import get_logger
from anonbox.models.user import User

log = get_logger(__name__)

DOCUMENT_MODELS = [
    User,
]

_client: Any = None
_lock: asyncio.Lock | None = None


def _use_tls(uri: str) -> bool:
    """True if URI uses TLS (Atlas or explicit tls=true). Avoids TLS for plain mongodb:// in CI."""
    return "mongodb+srv://" in uri or "tls=true" in uri.lower()


def _get_lock() -> asyncio.Lock:
    global _lock
    if _lock is None:
        _lock = asyncio.Lock()
    return _lock


async def init_db(client: Any = None) -> None:
    """Connect and initialize Beanie once; later calls return immediately.

    ``client`` binds an already-built Motor-compatible client instead of
    creating one from settings.
    """
    global _client
    if _client is not None:
        return
    async with _get_lock():
        if _client is not None:
            return
        settings = get_settings()
        if client is None:
            # Atlas in Docker: tlsCAFile + tlsDisableOCSPEndpointCheck avoid TLSV1_ALERT_INTERNAL_ERROR
            kwargs = {}
            if _use_tls(settings.mongodb_uri):
                kwargs["tlsCAFile"] = certifi.where()
                kwargs["tlsDisableOCSPEndpointCheck"] = True
            client = AsyncIOMotorClient(settings.mongodb_uri, **kwargs)
        database = client[settings.mongodb_db_name]
        await init_beanie(database=database, document_models=DOCUMENT_MODELS)
        _client = client
        log.info("db_initialized", db=settings.mongodb_db_name)


def reset_db() -> None:
    """Forget the current handle so the next init_db() binds a new client."""
    global _client, _lock
    _client = None
    _lock = None
