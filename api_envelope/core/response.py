"""
api_envelope.core.response
~~~~~~~~~~~~~~~~~~~~~~~~~~

统一应答信封 —— 累积一条应答记录，并以 JSON + 跨域头的形式输出。

每个请求创建一个独立的 ``Response``，不在请求之间共享，也不做任何加锁。

用法::

    envelope = Response({"message": "Hi"})
    envelope.set_code(201).set_data({"id": 42})
    return envelope.send_json(request.method, terminate=False)
"""
from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from starlette.responses import Response as StarletteResponse

from api_envelope.core.helpers import default_params
from api_envelope.core.logging import get_logger
from api_envelope.schemas.api_response import DEFAULT_RECORD, CorsPolicy

logger = get_logger(__name__)


class EnvelopeResponse(StarletteResponse):
    """``send_json`` 生成的 HTTP 应答。"""

    media_type = "application/json"


class EnvelopeSent(Exception):
    """应答已发出的终止信号。

    ``send_json(terminate=True)`` 抛出此异常，由外层请求处理器
    （见 ``api_envelope.main``）原样返回其中的 ``response``，
    之后的业务代码不再执行。
    """

    def __init__(self, response: EnvelopeResponse) -> None:
        super().__init__(f"envelope sent with status {response.status_code}")
        self.response = response


class Response:
    """标准化 API 应答信封。

    持有两份记录：不可变的 ``default``（重置目标）和可变的当前记录。
    所有 setter 返回自身，支持链式调用。

    Attributes:
        cors: ``send_json`` 使用的跨域策略。
    """

    def __init__(
        self,
        default: Mapping[str, Any] | None = None,
        cors: CorsPolicy | None = None,
    ) -> None:
        """
        Args:
            default: 覆盖基线记录的字段，允许未知键。
            cors: 跨域策略，缺省为 ``CorsPolicy()``。
        """
        self._default: dict[str, Any] = copy.deepcopy(default_params(DEFAULT_RECORD, default))
        self._response: dict[str, Any] = copy.deepcopy(self._default)
        self.cors = cors or CorsPolicy()

    # ── 批量设置 ──────────────────────────────────────────────────────

    def set(self, params: Mapping[str, Any] | BaseModel | None = None) -> Response:
        """将 ``params`` 合并到当前记录上（同名键覆盖）。

        ``params`` 为 Pydantic 模型时，只取显式赋值过的字段。
        """
        if isinstance(params, BaseModel):
            params = params.model_dump(exclude_unset=True)
        self._response = default_params(self._response, params)
        return self

    # ── 单字段 setter ─────────────────────────────────────────────────

    def set_code(self, code: int = 200) -> Response:
        self._response["code"] = code
        return self

    def set_success(self, success: bool = True) -> Response:
        self._response["success"] = success
        return self

    def set_message(self, message: str) -> Response:
        self._response["message"] = message
        return self

    def set_state(self, state: int = 0) -> Response:
        self._response["state"] = state
        return self

    def set_data(self, data: Any) -> Response:
        """设置业务数据。不检查可序列化性，推迟到 ``to_json`` 时再报错。"""
        self._response["data"] = data
        return self

    # ── getter ────────────────────────────────────────────────────────

    def get(self) -> dict[str, Any]:
        """返回当前记录的快照，修改返回值不会影响信封。"""
        return copy.deepcopy(self._response)

    def get_code(self) -> int:
        return self._response["code"]

    def get_success(self) -> bool:
        return self._response["success"]

    def get_message(self) -> str:
        return self._response["message"]

    def get_state(self) -> int:
        return self._response["state"]

    def get_data(self) -> Any:
        return self._response["data"]

    # ── 输出 ──────────────────────────────────────────────────────────

    def to_json(
        self,
        *,
        escape_unicode: bool = False,
        escape_slashes: bool = False,
        pretty: bool = False,
    ) -> str:
        """将当前记录序列化为 JSON 文本。

        默认输出紧凑格式，非 ASCII 字符和 ``/`` 都不转义。Pydantic 模型、
        datetime 等非原生值先经 ``jsonable_encoder`` 转换；关闭其
        ``sqlalchemy_safe``，否则以 ``_sa`` 开头的键会被丢弃。

        Args:
            escape_unicode: 将非 ASCII 字符输出为 ``\\uXXXX``。
            escape_slashes: 将 ``/`` 输出为 ``\\/``。
            pretty: 以 4 空格缩进输出。

        Raises:
            ValueError: 记录中包含 NaN / Infinity 等非有限浮点数。
            RecursionError: 记录中包含循环引用。
        """
        payload = jsonable_encoder(self._response, sqlalchemy_safe=False)
        text = json.dumps(
            payload,
            ensure_ascii=escape_unicode,
            allow_nan=False,
            indent=4 if pretty else None,
            separators=None if pretty else (",", ":"),
        )
        if escape_slashes:
            # JSON 文本中的 "/" 只可能出现在字符串内部
            text = text.replace("/", "\\/")
        return text

    def send_json(self, method: str, terminate: bool = True) -> EnvelopeResponse:
        """生成带跨域头的 JSON 应答。

        OPTIONS 预检请求一律返回 200，其余请求使用当前记录的 ``code``。
        HTTP 方法区分大小写，只有 ``"OPTIONS"`` 本身视为预检。

        Args:
            method: 入站请求的 HTTP 方法。
            terminate: 为 True 时通过 ``EnvelopeSent`` 终止后续处理。

        Returns:
            ``terminate=False`` 时返回应答对象，由调用方自行返回。

        Raises:
            EnvelopeSent: ``terminate=True`` 时总是抛出，携带应答对象。
        """
        status_code = 200 if method == "OPTIONS" else self.get_code()
        response = EnvelopeResponse(
            content=self.to_json(),
            status_code=status_code,
            headers=self.cors.headers(),
        )
        logger.debug(
            "应答已生成 | method=%s | status=%s | terminate=%s",
            method,
            status_code,
            terminate,
        )
        if terminate:
            raise EnvelopeSent(response)
        return response

    # ── 重置 ──────────────────────────────────────────────────────────

    def reset(self) -> dict[str, Any]:
        """将当前记录恢复为构造时的默认记录，并返回其快照。"""
        self._response = copy.deepcopy(self._default)
        return self.get()

    def __repr__(self) -> str:
        return f"Response({self._response!r})"
