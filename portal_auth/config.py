from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Identity Provider Settings
    IDP_URL: str = "https://localhost:9443/oauth2"
    IDP_REGISTER_PATH: str = "/register"
    IDP_INTROSPECT_PATH: str = "/introspect"
    IDP_ADMIN_USER: str = "admin"
    IDP_ADMIN_PASSWORD: str = "admin"
    IDP_HTTP_TIMEOUT: float = 10.0

    # Portal client registration
    CALLBACK_URL: str = "http://localhost:3000/auth"
    APPLICATION_NAME: str = "observability-portal"
    PLATFORM_CLIENT_ID: str = "observability-portal-client"

    # An introspection response without an 'active' claim counts as active
    # unless strict mode is switched on
    INTROSPECTION_REQUIRE_ACTIVE_CLAIM: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Optional[str] = "json"

    class Config:
        env_file = ".env"

settings = Settings()
