"""Key-value stores backing the persisted configuration blob.

``JsonFileStore`` is the standalone counterpart of the host's client
storage: one JSON document on disk holding every key. Provider tokens are
split out into the system keyring when a backend is available.
"""

import contextlib
import copy
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import orjson
from keyring.errors import KeyringError

from icon_bridge.constants import PROVIDER_KINDS, STORAGE_KEY
from icon_bridge.infrastructure.token import KeyringTokenStore
from icon_bridge.logger import get_logger

logger = get_logger(__name__)


def default_token_stores() -> dict[str, KeyringTokenStore]:
    return {provider: KeyringTokenStore(provider) for provider in PROVIDER_KINDS}


class InMemoryStore:
    """Process-local store, used when nothing should touch the disk."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(initial or {}))

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStore:
    """JSON file store with keyring-held provider tokens."""

    def __init__(
        self,
        path: Path,
        token_stores: Mapping[str, KeyringTokenStore] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            path: JSON file holding every key
            token_stores: Per-provider keyring stores; ``None`` uses the
                system keyring, an empty mapping keeps tokens in the file

        """
        self.path = path
        self.token_stores = (
            default_token_stores() if token_stores is None else token_stores
        )

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            data = orjson.loads(self.path.read_bytes())
        except orjson.JSONDecodeError as e:
            logger.warning("Ignoring corrupted store %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "Ignoring store %s: top level is not an object", self.path
            )
            return {}
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_suffix(".tmp")
        try:
            temp_file.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
            temp_file.replace(self.path)
        except OSError:
            with contextlib.suppress(OSError):
                temp_file.unlink()
            raise

    def _providers_of(self, value: Any) -> dict[str, Any]:
        providers = value.get("providers") if isinstance(value, dict) else None
        return providers if isinstance(providers, dict) else {}

    def _store_secrets(self, value: Any) -> Any:
        """Move tokens into the keyring, returning the file-bound copy."""
        stripped = copy.deepcopy(value)
        for provider, config in self._providers_of(stripped).items():
            token_store = self.token_stores.get(provider)
            if (
                not isinstance(config, dict)
                or token_store is None
                or not token_store.is_available()
            ):
                continue

            pat = config.get("pat") or ""
            try:
                if pat:
                    token_store.set(pat)
                else:
                    token_store.delete()
            except KeyringError as e:
                logger.warning(
                    "Could not store %s token in keyring, keeping it in %s: %s",
                    provider,
                    self.path.name,
                    e,
                )
                continue
            config["pat"] = ""
        return stripped

    def _load_secrets(self, value: Any) -> Any:
        for provider, config in self._providers_of(value).items():
            token_store = self.token_stores.get(provider)
            if not isinstance(config, dict) or token_store is None:
                continue
            if not config.get("pat"):
                token = token_store.get()
                if token:
                    config["pat"] = token
        return value

    async def get(self, key: str) -> Any | None:
        value = self._read_all().get(key)
        if key == STORAGE_KEY:
            value = self._load_secrets(value)
        return value

    async def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = self._store_secrets(value) if key == STORAGE_KEY else value
        self._write_all(data)
        logger.debug("Saved %s to %s", key, self.path)
