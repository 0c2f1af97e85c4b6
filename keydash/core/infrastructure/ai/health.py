"""AI 服务健康检查。

检查摘要所用的 OpenAI 模型是否可访问。
"""

import time

from loguru import logger
from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from keydash.core.config import settings
from keydash.core.infrastructure.health import HealthStatus


class AIServiceHealthResult(BaseModel):
    """AI 服务健康检查结果。"""

    status: HealthStatus = Field(..., description="健康状态")
    message: str | None = Field(None, description="状态消息")
    model: str | None = Field(None, description="摘要模型")
    latency_ms: int | None = Field(None, description="延迟（毫秒）", ge=0)
    error: str | None = Field(None, description="错误信息")

    def to_dict(self) -> dict[str, str | int | None]:
        return self.model_dump(mode="json", exclude_none=False)


async def check_ai_service_health() -> AIServiceHealthResult:
    """读取摘要模型的元数据，作为轻量探针。"""
    if not settings.LLM_ENABLED:
        return AIServiceHealthResult(
            status=HealthStatus.SKIPPED,
            message="LLM features are disabled",
        )

    if not settings.OPENAI_API_KEY:
        logger.warning("OpenAI API key is not configured")
        return AIServiceHealthResult(
            status=HealthStatus.ERROR,
            model=settings.OPENAI_SUMMARY_MODEL,
            error="API key not configured",
        )

    try:
        client = AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_API_BASE,
            timeout=5.0,
        )
        start_time = time.time()
        await client.models.retrieve(settings.OPENAI_SUMMARY_MODEL)
        latency_ms = int((time.time() - start_time) * 1000)

        return AIServiceHealthResult(
            status=HealthStatus.OK,
            model=settings.OPENAI_SUMMARY_MODEL,
            latency_ms=latency_ms,
        )
    except Exception as e:
        logger.error(f"OpenAI health check failed: {e}")
        return AIServiceHealthResult(
            status=HealthStatus.ERROR,
            model=settings.OPENAI_SUMMARY_MODEL,
            error=str(e),
        )
