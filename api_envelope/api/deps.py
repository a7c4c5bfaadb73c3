"""
api_envelope.api.deps
~~~~~~~~~~~~~~~~~~~~~

FastAPI 依赖项 —— 为每个请求提供跨域策略和一个新的应答信封。
"""
from fastapi import Depends

from api_envelope.core.config import get_settings
from api_envelope.core.response import Response
from api_envelope.schemas.api_response import CorsPolicy


def get_cors_policy() -> CorsPolicy:
    return get_settings().cors_policy


def get_envelope(cors: CorsPolicy = Depends(get_cors_policy)) -> Response:
    """每个请求一个新的应答信封，不跨请求共享。"""
    return Response(cors=cors)
