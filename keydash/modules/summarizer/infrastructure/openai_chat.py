"""OpenAI chat completion adapter."""

from collections.abc import Sequence

from loguru import logger
from openai import AsyncOpenAI

from keydash.core.config import settings
from keydash.modules.summarizer.domain.ports import ChatMessage


class OpenAIChatModel:
    """ChatModel backed by ``chat.completions`` in JSON mode."""

    def __init__(
        self,
        model: str | None = None,
        openai_client: AsyncOpenAI | None = None,
    ) -> None:
        self.model = model or settings.OPENAI_SUMMARY_MODEL
        self._client = openai_client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_API_BASE,
            )
        return self._client

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": m.role, "content": m.content} for m in messages],
            temperature=0,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        tokens_used = response.usage.total_tokens if response.usage else 0
        logger.info(f"Chat completion done, model={self.model}, tokens={tokens_used}")
        return content
