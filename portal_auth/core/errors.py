from typing import Optional


class PortalAuthError(Exception):
    """
    Base class for failures talking to the Identity Provider.
    The underlying exception (if any) is kept on `cause`.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigurationError(PortalAuthError):
    """A required IdP setting is missing or blank."""


class CredentialAcquisitionError(PortalAuthError):
    """
    Registering the portal client or looking up its existing registration failed.
    Callers should treat this as "try again later".
    """


class IntrospectionError(PortalAuthError):
    """
    The introspection endpoint could not be called or its response could not be read.
    Distinct from an inactive token, which is a plain False result.
    """


class SecretScrubbedError(PortalAuthError):
    """The client secret was wiped at shutdown and can no longer be read."""
