"""
api_envelope.main
~~~~~~~~~~~~~~~~~

FastAPI 应用入口 —— 注册异常处理器，提供健康检查端点。

业务路由通过 ``Depends(get_envelope)`` 获取信封，调用
``send_json(request.method)`` 即可结束请求处理。
"""
from __future__ import annotations

from fastapi import Depends, FastAPI, Request

from api_envelope.api.deps import get_cors_policy, get_envelope
from api_envelope.core.config import settings
from api_envelope.core.logging import get_logger, setup_logging
from api_envelope.core.response import EnvelopeResponse, EnvelopeSent, Response
from api_envelope.schemas.api_response import ResponseRecord

# 初始化日志系统（必须在其他模块之前）
setup_logging()
logger = get_logger(__name__)


# ── 异常处理器 ────────────────────────────────────────────────────────

async def envelope_sent_handler(request: Request, exc: EnvelopeSent) -> EnvelopeResponse:
    """``send_json(terminate=True)`` 的终点：原样返回已生成的应答。"""
    return exc.response


async def global_exception_handler(request: Request, exc: Exception) -> EnvelopeResponse:
    """捕获所有未处理异常，以统一信封格式返回 500。

    非 prod 环境返回详细错误信息，prod 环境隐藏内部细节。
    """
    logger.error("未捕获异常: %s %s -> %s", request.method, request.url, exc, exc_info=True)
    detail = str(exc) if not settings.is_prod else "服务器内部错误"
    # 异常处理器不经过依赖注入，需手动遵循 dependency_overrides
    policy_factory = request.app.dependency_overrides.get(get_cors_policy, get_cors_policy)
    envelope = Response(cors=policy_factory())
    envelope.set({"code": 500, "success": False, "message": detail, "data": None})
    return envelope.send_json(request.method, terminate=False)


def register_envelope_handlers(app: FastAPI) -> None:
    """在应用上注册信封相关的异常处理器。"""
    app.add_exception_handler(EnvelopeSent, envelope_sent_handler)
    app.add_exception_handler(Exception, global_exception_handler)


# ── 创建 FastAPI 实例 ─────────────────────────────────────────────────

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="统一 JSON 应答信封",
        version=settings.VERSION,
        debug=settings.debug,
    )
    register_envelope_handlers(app)

    @app.api_route(
        "/health",
        methods=["GET", "OPTIONS"],
        tags=["System"],
        responses={200: {"model": ResponseRecord}},
    )
    async def health_check(
        request: Request,
        envelope: Response = Depends(get_envelope),
    ) -> EnvelopeResponse:
        """验证服务是否正常运行。"""
        envelope.set_message("服务已就绪").set_data(
            {
                "status": "ok",
                "environment": settings.ENVIRONMENT,
                "version": settings.VERSION,
            },
        )
        return envelope.send_json(request.method, terminate=False)

    logger.info(
        "应用已创建 | env=%s | debug=%s | log_level=%s",
        settings.ENVIRONMENT,
        settings.debug,
        settings.effective_log_level,
    )
    return app


app: FastAPI = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api_envelope.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.debug,
        log_level=settings.effective_log_level.lower(),
    )
