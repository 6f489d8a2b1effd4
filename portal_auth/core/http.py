import httpx


def create_trust_all_client(timeout: float) -> httpx.Client:
    """
    HTTP client used for all IdP calls.
    Certificate validation is disabled since the IdP runs with a self-signed cert.
    """
    return httpx.Client(verify=False, timeout=timeout)
