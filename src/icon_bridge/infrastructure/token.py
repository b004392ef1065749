"""Provider token storage using the system keyring.

Each provider keeps its PAT under its own keyring service so that the
JSON store on disk never needs to hold a secret when a backend exists.
"""

import keyring
from keyring.backends import fail
from keyring.errors import KeyringError, PasswordDeleteError

from icon_bridge.constants import KEYRING_SERVICE_TEMPLATE, KEYRING_USERNAME
from icon_bridge.logger import get_logger

logger = get_logger(__name__)


class KeyringTokenStore:
    """Stores one provider's PAT in the system keyring."""

    def __init__(self, provider: str, username: str = KEYRING_USERNAME) -> None:
        self.provider = provider
        self.service = KEYRING_SERVICE_TEMPLATE.format(provider=provider)
        self.username = username
        self._available: bool | None = None

    def is_available(self) -> bool:
        """Return True when a usable keyring backend is configured."""
        if self._available is None:
            try:
                backend = keyring.get_keyring()
            except KeyringError as e:
                logger.debug("Keyring backend lookup failed: %s", e)
                self._available = False
            else:
                self._available = not isinstance(backend, fail.Keyring)
                if not self._available:
                    logger.debug("No keyring backend, tokens stay in the store")
        return self._available

    def get(self) -> str | None:
        if not self.is_available():
            return None

        try:
            token = keyring.get_password(self.service, self.username)
        except KeyringError:
            # Do not log details, they may include the secret
            logger.debug("Keyring read failed for %s", self.provider)
            return None

        return token or None

    def set(self, token: str) -> None:
        """Store the token.

        Raises:
            KeyringError: If the backend rejects the write

        """
        keyring.set_password(self.service, self.username, token)
        logger.debug("%s token saved to keyring (value hidden)", self.provider)

    def delete(self) -> None:
        """Remove the token, ignoring a missing entry."""
        if not self.is_available():
            return
        try:
            keyring.delete_password(self.service, self.username)
        except PasswordDeleteError:
            logger.debug("No %s token stored in keyring", self.provider)
