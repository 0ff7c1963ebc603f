from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    openrouter_api_key: Optional[str] = None
    openrouter_api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    default_model: str = "minimax/minimax-m2:free"
    forced_model: Optional[str] = None  # forces one model for every request
    app_referer: str = "https://pdf-to-quiz-generator.vercel.app"
    app_title: str = "PDF to Quiz Generator"
    max_tokens: int = 4000
    temperature: float = 0.3
    title_max_tokens: int = 50
    title_temperature: float = 0.2
    request_timeout: float = 30.0
    max_attempts: int = 3
    backoff_seconds: float = 1.0
    overall_timeout: float = 60.0
    prompt_char_budget: int = 2500
    default_question_count: int = 4
    max_question_count: int = 50
    substitute_sample_content: bool = True

    class Config:
        env_file = ".env"

settings = Settings()
