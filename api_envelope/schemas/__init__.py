"""
api_envelope.schemas
~~~~~~~~~~~~~~~~~~~~
Pydantic schemas describing the response record and CORS policy.
"""
from api_envelope.schemas.api_response import (
    DEFAULT_RECORD,
    CorsPolicy,
    ResponseRecord,
)

__all__ = ["DEFAULT_RECORD", "CorsPolicy", "ResponseRecord"]
