"""
api_envelope.schemas.api_response
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

全局统一应答体的结构定义，所有 API 接口复用此结构返回一致的 JSON 格式。

.. code-block:: json

    {"code": 200, "success": true, "message": "Default message", "state": 0, "data": {}}

``Response`` 信封本身以普通 ``dict`` 保存记录（开放结构，允许任意额外字段），
这里的 Pydantic 模型只负责 OpenAPI 文档和类型化视图，不参与校验。
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# 硬编码的基线记录，构造信封时与调用方覆盖项合并
DEFAULT_RECORD: dict[str, Any] = {
    "code": 200,
    "success": True,
    "message": "Default message",
    "state": 0,
    "data": {},
}

# 固定的跨域头
ALLOW_HEADERS: str = "Content-Type, Authorization"
ALLOW_CREDENTIALS: str = "true"
CONTENT_TYPE: str = "application/json; charset=UTF-8"


class ResponseRecord(BaseModel):
    """统一 JSON 应答体。

    Attributes:
        code: HTTP 风格状态码，200 表示成功。
        success: 业务是否成功。
        message: 人类可读的状态消息。
        state: 应用自定义的二级状态码。
        data: 实际业务数据（字典、列表或标量）。
    """

    model_config = ConfigDict(extra="allow")

    code: int = Field(default=200, description="HTTP 风格状态码")
    success: bool = Field(default=True, description="是否成功")
    message: str = Field(default="Default message", description="状态消息")
    state: int = Field(default=0, description="应用自定义二级状态码")
    data: Any = Field(default_factory=dict, description="业务数据")


class CorsPolicy(BaseModel):
    """``send_json`` 输出的跨域配置。

    显式传入信封，而不是读取进程级全局常量。
    """

    model_config = ConfigDict(frozen=True)

    allow_origin: str = Field(default="*", description="Access-Control-Allow-Origin")
    allow_methods: str = Field(
        default="GET, POST, OPTIONS",
        description="Access-Control-Allow-Methods",
    )

    def headers(self) -> dict[str, str]:
        """按固定顺序返回全部应答头（含 Content-type）。"""
        return {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Allow-Methods": self.allow_methods,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Allow-Credentials": ALLOW_CREDENTIALS,
            "Content-type": CONTENT_TYPE,
        }
