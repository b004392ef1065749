"""Exception classes for icon-bridge operations.

Every error raised by the core carries a message that is safe to show to
the user as-is: sync failures are forwarded verbatim to the UI peer.
"""


class IconBridgeError(Exception):
    """Base exception for icon-bridge operations."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        """Initialize error with message and optional provider.

        Args:
            message: User-facing error message.
            provider: Optional provider kind the error relates to.

        """
        super().__init__(message)
        self.message = message
        self.provider = provider

    def __str__(self) -> str:
        """Return the user-facing message."""
        return self.message


class AuthRequiredError(IconBridgeError):
    """Raised when a provider has no personal access token."""


class InvalidInputError(IconBridgeError):
    """Raised when an organization, repository or project is malformed."""


class TruncatedListingError(IconBridgeError):
    """Raised when GitHub reports a truncated recursive tree."""


class NoIconsFoundError(IconBridgeError):
    """Raised when a repository listing contains no SVG files."""


class InvalidMetadataError(IconBridgeError):
    """Raised when an icon metadata sidecar is not valid JSON."""


class InvalidSvgError(IconBridgeError):
    """Raised when a fetched body has no recognizable <svg> root."""


class VariantMissingError(IconBridgeError):
    """Raised when a requested variant does not exist for an icon family."""

    def __init__(self, base_name: str, variant: str) -> None:
        """Initialize error with the family and the missing variant.

        Args:
            base_name: Icon family name.
            variant: Variant that could not be found.

        """
        super().__init__(f"{base_name} has no {variant} variant")
        self.base_name = base_name
        self.variant = variant


class UnknownProviderError(IconBridgeError):
    """Raised when a provider kind is not github or azure."""


class ProviderError(IconBridgeError):
    """Raised when a provider call fails or returns an unusable payload."""


class ProviderHTTPError(ProviderError):
    """Raised when a provider responds with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status: int,
        reason: str = "",
        provider: str | None = None,
    ) -> None:
        """Initialize error with HTTP status details.

        Args:
            message: Error message built from the response body.
            status: HTTP status code.
            reason: HTTP reason phrase.
            provider: Optional provider kind.

        """
        super().__init__(message, provider)
        self.status = status
        self.reason = reason


def get_error_message(error: BaseException | str | None) -> str:
    """Return a user-facing message for any raised value.

    Args:
        error: Exception instance, plain string or None.

    Returns:
        The message, or "Unexpected error" when nothing usable is present.

    """
    if isinstance(error, BaseException):
        message = str(error).strip()
        if message:
            return message
    elif isinstance(error, str) and error.strip():
        return error.strip()
    return "Unexpected error"
