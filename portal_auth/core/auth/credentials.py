import base64
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

import httpx
import structlog

from portal_auth.config import Settings, settings as app_settings
from portal_auth.core.auth.idp import IdPProvider
from portal_auth.core.errors import (
    ConfigurationError,
    CredentialAcquisitionError,
    IntrospectionError,
    SecretScrubbedError,
)
from portal_auth.core.http import create_trust_all_client

logger = structlog.get_logger(__name__)

ERROR_KEY = "error"
ACTIVE_KEY = "active"
CLIENT_ID_KEY = "client_id"
CLIENT_SECRET_KEY = "client_secret"
CLIENT_NAME_KEY = "client_name"
AUTHORIZATION_CODE_GRANT = "authorization_code"
BASIC_AUTH_PREFIX = "Basic "

# Errors raised while building or sending a request to the IdP
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ConfigurationError)

T = TypeVar("T")


def encode_basic_auth(username: str, password: str) -> str:
    """
    Value for an `Authorization` header carrying HTTP Basic credentials.
    """
    raw = f"{username}:{password}".encode("utf-8")
    return BASIC_AUTH_PREFIX + base64.b64encode(raw).decode("ascii")


class SecretBuffer:
    """
    Mutable holder for a secret so it can be zeroed in place once no longer needed.
    """

    __slots__ = ("_buffer", "_wiped")

    def __init__(self, value: str):
        self._buffer = bytearray(value.encode("utf-8"))
        self._wiped = False

    def reveal(self) -> str:
        if self._wiped:
            raise SecretScrubbedError("Client secret has been scrubbed from memory")
        return self._buffer.decode("utf-8")

    def wipe(self) -> None:
        for i in range(len(self._buffer)):
            self._buffer[i] = 0
        self._wiped = True

    def is_wiped(self) -> bool:
        return self._wiped

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        return "SecretBuffer('**********')"


@dataclass(frozen=True)
class ClientCredentials:
    client_id: str
    client_secret: SecretBuffer


class GuardedValue(Generic[T]):
    """
    Write-once value guarded by a lock.

    Reads after the value is set never touch the lock. The value is published by a
    single reference assignment made while holding the lock, so concurrent readers
    either see nothing or the complete object.
    """

    def __init__(self):
        self._value: Optional[T] = None
        self._lock = threading.Lock()

    def peek(self) -> Optional[T]:
        return self._value

    def get_or_compute(self, compute: Callable[[], T]) -> T:
        value = self._value
        if value is not None:
            return value

        with self._lock:
            # Another thread may have finished while we waited for the lock
            if self._value is None:
                self._value = compute()
            return self._value


def _parse_json_object(response: httpx.Response) -> Dict[str, Any]:
    document = response.json()
    if not isinstance(document, dict):
        raise ValueError(f"Expected a JSON object from {response.request.url}, got {type(document).__name__}")
    return document


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


class CredentialProvider(IdPProvider):
    """
    Manages the OAuth client registered for the observability portal.

    The client id and secret are obtained on first use, either through dynamic client
    registration or, if the IdP reports the client already exists, by looking up the
    existing registration. Nothing is fetched at construction time; a failed attempt
    leaves the provider uninitialized so the next call tries again.
    """

    def __init__(self, settings: Optional[Settings] = None, http_client: Optional[httpx.Client] = None):
        self.settings = settings or app_settings
        self.http_client = http_client or create_trust_all_client(self.settings.IDP_HTTP_TIMEOUT)
        self._credentials: GuardedValue[ClientCredentials] = GuardedValue()

    @property
    def is_initialized(self) -> bool:
        return self._credentials.peek() is not None

    def get_client_id(self) -> str:
        return self._credentials.get_or_compute(self._acquire_credentials).client_id

    def get_client_secret(self) -> str:
        return self._credentials.get_or_compute(self._acquire_credentials).client_secret.reveal()

    def scrub(self) -> None:
        credentials = self._credentials.peek()
        if credentials is not None:
            credentials.client_secret.wipe()

    def close(self) -> None:
        """
        Wipe the secret and release the HTTP connection pool.
        """
        self.scrub()
        self.http_client.close()

    def _acquire_credentials(self) -> ClientCredentials:
        """
        Register the portal client, falling back to fetching the existing registration
        when the IdP rejects the registration with an error body.
        """
        document = self._register_client()
        if ERROR_KEY in document:
            logger.info(
                "idp.client_already_registered",
                application=self.settings.APPLICATION_NAME,
                error=document.get(ERROR_KEY),
            )
            document = self._fetch_existing_client()

        client_id = document.get(CLIENT_ID_KEY)
        client_secret = document.get(CLIENT_SECRET_KEY)
        if not client_id or client_secret is None:
            raise CredentialAcquisitionError(
                "Error while retrieving client credentials. "
                "Expected client credentials are not found in the response"
            )

        logger.info("idp.client_credentials_acquired", client_id=client_id)
        return ClientCredentials(client_id=str(client_id), client_secret=SecretBuffer(str(client_secret)))

    def _register_client(self) -> Dict[str, Any]:
        try:
            payload = {
                "ext_param_client_id": self.settings.PLATFORM_CLIENT_ID,
                CLIENT_NAME_KEY: self.settings.APPLICATION_NAME,
                "redirect_uris": [self._require("CALLBACK_URL")],
                "grant_types": [AUTHORIZATION_CODE_GRANT],
            }
            logger.debug("idp.registering_client", application=self.settings.APPLICATION_NAME)
            response = self.http_client.post(
                self._endpoint(self.settings.IDP_REGISTER_PATH),
                json=payload,
                headers={"Authorization": self._admin_authorization()},
            )
            return _parse_json_object(response)
        except _REQUEST_ERRORS + (ValueError,) as e:
            raise CredentialAcquisitionError("Error occurred while registering client", cause=e) from e

    def _fetch_existing_client(self) -> Dict[str, Any]:
        application = self.settings.APPLICATION_NAME
        try:
            response = self.http_client.get(
                self._endpoint(self.settings.IDP_REGISTER_PATH),
                params={CLIENT_NAME_KEY: application},
                headers={"Authorization": self._admin_authorization()},
            )
        except _REQUEST_ERRORS as e:
            raise CredentialAcquisitionError(
                f"Error occurred while retrieving the client credentials with name {application}", cause=e
            ) from e

        try:
            document = response.json()
        except ValueError:
            document = None

        if response.is_success and isinstance(document, dict) and CLIENT_ID_KEY in document:
            return document

        logger.warning("idp.client_lookup_failed", application=application, status_code=response.status_code)
        raise CredentialAcquisitionError(
            "Error while retrieving client credentials. "
            "Expected client credentials are not found in the response"
        )

    def validate_token(self, token: str) -> bool:
        try:
            response = self.http_client.post(
                self._endpoint(self.settings.IDP_INTROSPECT_PATH),
                data={"token": token},
                headers={"Authorization": self._admin_authorization()},
            )
            status_code = response.status_code
            if not 200 <= status_code < 400:
                logger.error(
                    "idp.introspection_failed",
                    status_code=status_code,
                    detail="Failed to connect to introspect endpoint in Identity Provider",
                )
                return False
            document = _parse_json_object(response)
        except _REQUEST_ERRORS + (ValueError,) as e:
            raise IntrospectionError("Error occurred while calling the introspect endpoint", cause=e) from e

        if ACTIVE_KEY not in document:
            if self.settings.INTROSPECTION_REQUIRE_ACTIVE_CLAIM:
                logger.warning("idp.introspection_missing_active_claim", status_code=status_code)
                return False
            return True

        return _as_bool(document[ACTIVE_KEY])

    def _endpoint(self, path: str) -> str:
        return self._require("IDP_URL").rstrip("/") + path

    def _admin_authorization(self) -> str:
        return encode_basic_auth(self._require("IDP_ADMIN_USER"), self._require("IDP_ADMIN_PASSWORD"))

    def _require(self, name: str) -> str:
        value = getattr(self.settings, name, None)
        if value is None or not str(value).strip():
            raise ConfigurationError(f"{name} is not configured")
        return str(value)
