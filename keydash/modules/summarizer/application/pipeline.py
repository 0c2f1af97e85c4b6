"""README summarization pipeline: prompt, model call, parse."""

from loguru import logger

from keydash.modules.summarizer.application.summary_parser import (
    parse_summary_output,
)
from keydash.modules.summarizer.domain.entities import RepoSummary
from keydash.modules.summarizer.domain.ports import ChatMessage, ChatModel

SYSTEM_PROMPT = """You are an expert technical writer.

Summarize this GitHub repository based on the README content provided.
Provide a concise summary of what this repository is about, followed by a \
list of at least 3 "cool facts" or interesting points about the repo \
(if possible).

Your reply must be a JSON object with the following structure:
    {
      "summary": string,
      "coolFacts": string[]
    }"""

USER_PROMPT_TEMPLATE = """Here is the README content to analyze:

{context}

Remember: Output strictly a JSON object with a summary field and a \
coolFacts array."""


class LLMReadmeSummarizer:
    """Summarize README text with a chat model.

    Errors from the model call propagate; malformed replies do not.
    """

    def __init__(self, chat_model: ChatModel) -> None:
        self._chat_model = chat_model

    @staticmethod
    def build_messages(readme: str) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(
                role="user", content=USER_PROMPT_TEMPLATE.format(context=readme)
            ),
        ]

    async def summarize(self, readme: str) -> RepoSummary:
        logger.debug(f"Summarizing README of {len(readme)} chars")
        raw_output = await self._chat_model.complete(self.build_messages(readme))
        logger.debug(f"Model output preview: {raw_output[:200]!r}")

        summary = parse_summary_output(raw_output)
        logger.debug(f"Parsed summary with {len(summary.cool_facts)} cool facts")
        return summary
