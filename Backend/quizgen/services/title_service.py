import logging
import re

from quizgen.errors import ConfigurationMissing, QuizGenerationError, TitleUnavailable
from quizgen.services.completion_client import CompletionClient
from quizgen.services.prompt_builder import build_title_prompt

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Quiz"
MAX_TITLE_LENGTH = 100


def title_from_file_name(file_name: str) -> str:
    """Strip the extension, turn separators into spaces and capitalize each word"""
    stem = re.sub(r"\.[^/.]+$", "", file_name or "").strip()
    if len(stem) < 3:
        return DEFAULT_TITLE
    words = re.sub(r"[_-]", " ", stem).split(" ")
    title = " ".join(word[:1].upper() + word[1:] for word in words).strip()
    return title if len(title) >= 3 else DEFAULT_TITLE


class TitleService:
    def __init__(self, client_factory):
        # client_factory() -> CompletionClient, raises ConfigurationMissing without a key
        self.client_factory = client_factory

    async def _request_title(self, file_name: str) -> str:
        try:
            client: CompletionClient = self.client_factory()
        except ConfigurationMissing as e:
            raise TitleUnavailable(str(e)) from e

        settings = client.settings
        try:
            content = await client.complete(
                build_title_prompt(file_name),
                max_tokens=settings.title_max_tokens,
                temperature=settings.title_temperature,
                max_attempts=1,
            )
        except QuizGenerationError as e:
            raise TitleUnavailable(str(e)) from e

        lines = content.strip().splitlines()
        title = lines[0].strip().strip("\"'").strip() if lines else ""
        if not title:
            raise TitleUnavailable("empty title response")
        if len(title) > MAX_TITLE_LENGTH:
            raise TitleUnavailable(f"title response too long ({len(title)} characters)")
        if title.lower() == "quiz":
            return DEFAULT_TITLE
        return title

    async def derive_title(self, file_name: str) -> str:
        """Ask the completion service for a title; never raises"""
        logger.info(f"Generating title for: {file_name}")
        try:
            title = await self._request_title(file_name)
            logger.info(f"Generated title: {title}")
            return title
        except TitleUnavailable as e:
            logger.warning(f"Using default title as fallback: {str(e)}")
            return title_from_file_name(file_name)
