from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./showroom.db"

    # Admin authentication
    JWT_SECRET: str = "secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 8

    # Description assistant (OpenAI chat completions)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    DESCRIPTION_TIMEOUT_SECONDS: float = 15.0

    # Image uploads
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_IMAGES: int = 6
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS: List[str] = ["png", "jpg", "jpeg", "gif", "webp"]

    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    REDIS_URL: str = "redis://localhost:6379/0"
    PURGE_ORPHANED_UPLOADS: bool = False

    class Config:
        # This tells Pydantic to load the variables from a .env file
        env_file = ".env"

# Create a single settings instance to be used across the application
settings = Settings()
