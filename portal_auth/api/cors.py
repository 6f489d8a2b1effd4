from starlette.requests import Request
from starlette.responses import Response

ALLOWED_METHODS = "GET, POST, PUT, DELETE"
MAX_AGE_SECONDS = "3600"
ALLOWED_HEADERS = "Content-Type"


def apply_cors_headers(request: Request, response: Response) -> bool:
    """
    Stamp cross-origin headers on an outgoing response.

    Browsers send an OPTIONS preflight before the real call, so this alone is not
    enough; the app also answers OPTIONS on every path.
    Always returns True, the request is never short-circuited.
    """
    response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
    response.headers["Access-Control-Max-Age"] = MAX_AGE_SECONDS
    response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS

    origin = request.headers.get("Origin")
    if origin and origin.strip():
        response.headers["Access-Control-Allow-Origin"] = origin
    else:
        response.headers["Access-Control-Allow-Origin"] = "*"
    return True
