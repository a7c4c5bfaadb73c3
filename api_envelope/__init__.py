"""
api_envelope
~~~~~~~~~~~~
Standardized JSON response envelope with CORS headers.
"""
from api_envelope.core.response import EnvelopeResponse, EnvelopeSent, Response
from api_envelope.schemas.api_response import CorsPolicy, ResponseRecord

__version__ = "0.1.0"

__all__ = [
    "CorsPolicy",
    "EnvelopeResponse",
    "EnvelopeSent",
    "Response",
    "ResponseRecord",
]
