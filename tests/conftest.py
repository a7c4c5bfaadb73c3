"""
tests.conftest
~~~~~~~~~~~~~~

共享 pytest fixtures —— 应答信封实例、跨域策略以及挂载了测试路由的
FastAPI ``TestClient``。
"""
from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

# ── 在所有测试导入前设置环境变量 ─────────────────────────────────────
os.environ.setdefault("ENVIRONMENT", "test")

from fastapi import Depends, FastAPI, Request  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from api_envelope.api.deps import get_envelope  # noqa: E402
from api_envelope.core.response import Response  # noqa: E402
from api_envelope.main import create_app  # noqa: E402
from api_envelope.schemas.api_response import CorsPolicy  # noqa: E402


@pytest.fixture()
def envelope() -> Response:
    """默认配置的应答信封。"""
    return Response()


@pytest.fixture()
def cors_policy() -> CorsPolicy:
    """非默认的跨域策略，便于断言应答头确实来自配置。"""
    return CorsPolicy(
        allow_origin="https://example.com",
        allow_methods="GET, PUT",
    )


@pytest.fixture()
def reached() -> list[str]:
    """记录 ``send_json`` 之后的代码是否被执行。"""
    return []


@pytest.fixture()
def test_app(reached: list[str]) -> FastAPI:
    """在正式应用上追加几个演示终止 / 异常行为的路由。"""
    app = create_app()

    @app.api_route("/missing", methods=["GET", "OPTIONS"])
    async def missing(
        request: Request,
        envelope: Response = Depends(get_envelope),
    ):
        envelope.set_code(404).set_success(False).set_message("not found")
        envelope.send_json(request.method)
        reached.append("after send_json")

    @app.post("/items")
    async def create_item(
        request: Request,
        envelope: Response = Depends(get_envelope),
    ):
        envelope.set({"code": 201, "message": "created"}).set_data({"id": 42})
        response = envelope.send_json(request.method, terminate=False)
        reached.append("after send_json")
        return response

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return app


@pytest.fixture()
def client(test_app: FastAPI) -> Iterator[TestClient]:
    """未捕获异常交给应用处理器，而不是在测试里重新抛出。"""
    with TestClient(test_app, raise_server_exceptions=False) as c:
        yield c
