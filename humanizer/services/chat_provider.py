"""
Chat-Completion Strategy

Single-call rewrite through the OpenAI chat completions API (or any
OpenAI-compatible endpoint via base_url). The system instruction comes
from prompt_builder; the user message is the raw text.

An empty response, or one identical to the input, is a failure.
"""

from typing import Optional

from openai import AsyncOpenAI

from ..models.schemas import HumanizationOptions
from .prompt_builder import build_system_instruction
from .strategies import RecoverableRewriteError, RewriteStrategy


class ChatCompletionStrategy(RewriteStrategy):
    """
    Rewrite via chat completions.

    API ACCESS:
    - Bearer token from: OPENAI_API_KEY environment variable
    - Optional OPENAI_BASE_URL for compatible providers
    """

    name = "chat_completion"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        client: Optional[AsyncOpenAI] = None
    ):
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.temperature = temperature

    async def attempt(self, text: str, options: HumanizationOptions) -> str:
        system_instruction = build_system_instruction(options)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": text}
                ],
                temperature=self.temperature
            )
        except Exception as e:
            # API errors, network errors, auth errors...
            raise RecoverableRewriteError(
                "Failed to rewrite text. Please try again later.",
                internal_reason=f"Chat completion error: {type(e).__name__}: {e}"
            )

        content = response.choices[0].message.content if response.choices else None
        rewritten = (content or "").strip()

        if not rewritten:
            raise RecoverableRewriteError(
                "AI returned an empty response.",
                internal_reason="Empty chat completion"
            )
        if rewritten == text.strip():
            raise RecoverableRewriteError(
                "AI returned the text unchanged.",
                internal_reason="Chat completion identical to input"
            )

        return rewritten
