"""
Wayfarer Service Configuration
Loads settings from environment variables
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment"""

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "3000"))
    API_ENV: str = os.getenv("API_ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Configuration
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Static front end (optional)
    STATIC_DIR: str = os.getenv("STATIC_DIR", "")

    # Generative text provider
    GEMINI_API_URL: str = os.getenv("GEMINI_API_URL", "")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_AUTH_MODE: str = os.getenv("GEMINI_AUTH_MODE", "bearer")  # bearer | api_key | query
    GEMINI_REQUEST_FORMAT: str = os.getenv("GEMINI_REQUEST_FORMAT", "generic")  # generic | gemini
    GEMINI_TIMEOUT: float = float(os.getenv("GEMINI_TIMEOUT", "20"))
    GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "800"))

    # Comment store
    COMMENTS_BACKEND: str = os.getenv("COMMENTS_BACKEND", "local")  # local | github
    COMMENTS_FILE: str = os.getenv("COMMENTS_FILE", os.path.join("data", "comments.json"))

    # GitHub-hosted comment file
    GITHUB_API_URL: str = os.getenv("GITHUB_API_URL", "https://api.github.com")
    GITHUB_REPO: str = os.getenv("GITHUB_REPO", "")
    GITHUB_BRANCH: str = os.getenv("GITHUB_BRANCH", "main")
    GITHUB_PATH: str = os.getenv("GITHUB_PATH", "data/comments.json")
    GITHUB_TOKEN: str = os.getenv("GITHUB_TOKEN", "")
    GITHUB_TIMEOUT: float = float(os.getenv("GITHUB_TIMEOUT", "15"))

    # Optimistic concurrency
    STORE_MAX_ATTEMPTS: int = int(os.getenv("STORE_MAX_ATTEMPTS", "4"))
    GITHUB_RETRY_BASE_DELAY: float = float(os.getenv("GITHUB_RETRY_BASE_DELAY", "0.2"))
    LOCAL_RETRY_INTERVAL: float = float(os.getenv("LOCAL_RETRY_INTERVAL", "0.03"))
    LOCAL_WRITE_TIMEOUT: float = float(os.getenv("LOCAL_WRITE_TIMEOUT", "5"))

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.API_ENV.lower() == "production"

    @property
    def search_configured(self) -> bool:
        return bool(self.GEMINI_API_URL and self.GEMINI_API_KEY)


# Global settings instance
settings = Settings()
