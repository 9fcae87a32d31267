"""Optional OpenAI call that turns the day's events into a post."""

import logging

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_PROMPT = (
    "You write highly engaging social media posts from short notes a person "
    "jotted down during their day. Keep their voice, do not invent events, "
    "and reply with the posts only."
)


class SummaryService:
    def __init__(
        self,
        api_key: str,
        model: str,
        enabled: bool = False,
        system_prompt: str = DEFAULT_SUMMARY_PROMPT,
        client: AsyncOpenAI | None = None,
    ):
        self.enabled = enabled and bool(api_key or client)
        self.model = model
        self.system_prompt = system_prompt
        self.client = client
        if self.enabled and self.client is None:
            self.client = AsyncOpenAI(api_key=api_key)

    async def summarize(self, texts: list[str]) -> str | None:
        """Composed post, or None when disabled or the API call fails."""
        if not self.enabled or not texts:
            return None

        events = "\n".join(f"- {t}" for t in texts)
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": f"Events of the day:\n{events}"},
                ],
                max_completion_tokens=1024,
            )
        except Exception:
            logger.exception("Summary request failed, falling back to raw events")
            return None

        if response.usage:
            logger.info(
                "Summary usage: %d in / %d out",
                response.usage.prompt_tokens or 0,
                response.usage.completion_tokens or 0,
            )
        if not response.choices:
            return None
        content = (response.choices[0].message.content or "").strip()
        return content or None
