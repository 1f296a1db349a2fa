"""
OpenAI client with rate limiting using aiolimiter.
"""
from aiolimiter import AsyncLimiter
from openai import AsyncOpenAI
from loguru import logger

from website_updater.config import Settings


class OpenAIClient:
    """
    OpenAI client for making chat completion requests.
    One instance per run, built from the run's Settings.
    """

    def __init__(self, settings: Settings):
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY must be set in environment or config")

        self.model = settings.openai_model
        self.client = AsyncOpenAI(api_key=settings.openai_api_key, timeout=settings.ai_timeout)
        # Token bucket: rate_limit requests per second
        self.rate_limiter = AsyncLimiter(max_rate=settings.rate_limit, time_period=1.0)

    async def chat_completions_create(self, **kwargs):
        """
        Create a chat completion with rate limiting.
        Accepts all arguments that AsyncOpenAI.chat.completions.create accepts;
        the configured model is used when none is given.

        Returns:
            The response from OpenAI's chat completions API.
        """
        kwargs.setdefault("model", self.model)
        async with self.rate_limiter:
            try:
                return await self.client.chat.completions.create(**kwargs)
            except Exception as e:
                logger.debug(f"⚠️ OpenAI API request failed: {e}")
                raise

    async def close(self):
        await self.client.close()
