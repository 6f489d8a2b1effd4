from abc import ABC, abstractmethod

class IdPProvider(ABC):
    """
    Abstract interface for the portal's Identity Provider operations.
    Decouples the API layer from the concrete IdP client so tests can swap in a fake.
    """

    @abstractmethod
    def get_client_id(self) -> str:
        """
        Client identifier of the OAuth client registered for the portal.
        
        Raises:
            CredentialAcquisitionError: If the client could not be registered or looked up
        """
        pass

    @abstractmethod
    def get_client_secret(self) -> str:
        """
        Client secret of the OAuth client registered for the portal.
        
        Raises:
            CredentialAcquisitionError: If the client could not be registered or looked up
            SecretScrubbedError: If the secret was already wiped by scrub()
        """
        pass

    @abstractmethod
    def validate_token(self, token: str) -> bool:
        """
        Check whether an access token is currently active.
        
        Args:
            token: The raw bearer token
            
        Returns:
            True if the IdP reports the token active, False if it is inactive
            or the IdP answered with an error status
            
        Raises:
            IntrospectionError: If validity could not be determined
        """
        pass

    def scrub(self) -> None:
        """
        Wipe any secret material held in memory. No-op by default.
        """
        pass

    def close(self) -> None:
        """
        Release resources held by the provider. Scrubs secrets by default.
        """
        self.scrub()
