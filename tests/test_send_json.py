"""
tests.test_send_json
~~~~~~~~~~~~~~~~~~~~

``Response.send_json`` 的线上格式测试：状态码、应答头顺序、应答体与终止信号。
"""
from __future__ import annotations

import json
import logging

import pytest

from api_envelope.core.response import EnvelopeResponse, EnvelopeSent, Response
from api_envelope.schemas.api_response import CorsPolicy

EXPECTED_HEADER_NAMES = [
    b"access-control-allow-origin",
    b"access-control-allow-methods",
    b"access-control-allow-headers",
    b"access-control-allow-credentials",
    b"content-type",
]


class TestStatus:
    """测试状态码选择。"""

    def test_uses_record_code(self, envelope: Response) -> None:
        """非 OPTIONS 请求使用记录中的 ``code``。"""
        response = envelope.set_code(404).send_json("GET", terminate=False)

        assert response.status_code == 404

    def test_options_always_200(self, envelope: Response) -> None:
        """OPTIONS 预检请求一律返回 200，记录本身不变。"""
        response = envelope.set_code(404).send_json("OPTIONS", terminate=False)

        assert response.status_code == 200
        assert envelope.get_code() == 404
        assert json.loads(response.body)["code"] == 404

    @pytest.mark.parametrize("method", ["options", "Options"])
    def test_method_is_case_sensitive(self, envelope: Response, method: str) -> None:
        """HTTP 方法区分大小写，非精确的 ``OPTIONS`` 按普通请求处理。"""
        response = envelope.set_code(404).send_json(method, terminate=False)

        assert response.status_code == 404


class TestHeaders:
    """测试跨域头与 Content-type。"""

    def test_default_headers_in_order(self, envelope: Response) -> None:
        """默认策略下五个头按固定顺序输出。"""
        response = envelope.send_json("GET", terminate=False)

        assert [name for name, _ in response.raw_headers[:5]] == EXPECTED_HEADER_NAMES
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"
        assert response.headers["access-control-allow-credentials"] == "true"
        assert response.headers["content-type"] == "application/json; charset=UTF-8"

    def test_content_type_not_duplicated(self, envelope: Response) -> None:
        """Content-type 只出现一次。"""
        response = envelope.send_json("GET", terminate=False)

        names = [name for name, _ in response.raw_headers]
        assert names.count(b"content-type") == 1

    def test_configured_policy(self, cors_policy: CorsPolicy) -> None:
        """跨域来源与方法取自显式传入的策略。"""
        response = Response(cors=cors_policy).send_json("POST", terminate=False)

        assert response.headers["access-control-allow-origin"] == "https://example.com"
        assert response.headers["access-control-allow-methods"] == "GET, PUT"


class TestBody:
    """测试应答体。"""

    def test_body_is_utf8_json(self, envelope: Response) -> None:
        """应答体为 UTF-8 编码的 ``to_json()`` 输出。"""
        envelope.set_message("café/tea")

        response = envelope.send_json("GET", terminate=False)

        assert isinstance(response, EnvelopeResponse)
        assert response.body == envelope.to_json().encode("utf-8")
        assert "café/tea".encode("utf-8") in response.body


class TestTerminate:
    """测试终止信号。"""

    def test_terminate_raises_with_response(self, envelope: Response) -> None:
        """``terminate=True`` 抛出携带应答的 ``EnvelopeSent``。"""
        envelope.set_code(403)

        with pytest.raises(EnvelopeSent) as exc_info:
            envelope.send_json("GET")

        assert exc_info.value.response.status_code == 403
        assert json.loads(exc_info.value.response.body) == envelope.get()

    def test_no_terminate_returns(self, envelope: Response) -> None:
        """``terminate=False`` 直接返回应答对象。"""
        response = envelope.send_json("GET", terminate=False)

        assert response.status_code == 200

    def test_encoder_error_propagates(self, envelope: Response) -> None:
        """序列化失败直接向调用方抛出，不生成应答。"""
        envelope.set_data(float("nan"))

        with pytest.raises(ValueError):
            envelope.send_json("GET")

    def test_logs_debug(self, envelope: Response, caplog: pytest.LogCaptureFixture) -> None:
        """生成应答时记录 DEBUG 日志。"""
        caplog.set_level(logging.DEBUG, logger="api_envelope.core.response")

        envelope.send_json("OPTIONS", terminate=False)

        assert "status=200" in caplog.text
