from pydantic import BaseModel

class ClientIdResponse(BaseModel):
    client_id: str
    callback_url: str

class TokenValidity(BaseModel):
    valid: bool
