import os
import sys
import time

# Ensure we can import portal_auth
sys.path.append(os.getcwd())
from portal_auth.config import settings
from portal_auth.core.auth.credentials import CredentialProvider
from portal_auth.core.errors import CredentialAcquisitionError
from portal_auth.core.logging import configure_logging

def wait_for_client(provider, max_retries=30, delay=2):
    print(f"Connecting to Identity Provider at {settings.IDP_URL}...")
    for i in range(max_retries):
        try:
            # Registers the portal client, or looks it up if it already exists
            return provider.get_client_id()
        except CredentialAcquisitionError as e:
            print(f"Waiting for Identity Provider... ({i+1}/{max_retries}): {e}")
            time.sleep(delay)
    return None

def register_client():
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    provider = CredentialProvider()

    client_id = wait_for_client(provider)
    if client_id is None:
        print("Could not register the portal client. Exiting.")
        sys.exit(1)

    print(f"Client '{settings.APPLICATION_NAME}' is registered with client id {client_id}")
    provider.close()

if __name__ == "__main__":
    register_client()
