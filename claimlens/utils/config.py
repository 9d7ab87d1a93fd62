from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

@dataclass(frozen=True)
class AppConfig:
    model_name: str = "gemini-2.5-flash"
    temperature: float = 0.1
    max_tokens: int = 8192
    api_key_env: str = "GOOGLE_API_KEY"
    currency: str = "INR"
    log_level: str = "INFO"
    max_upload_mb: int = 20

    @classmethod
    def from_env(cls) -> "AppConfig":
        load_dotenv()
        return cls(
            model_name=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            temperature=float(os.getenv("TEMPERATURE", "0.1")),
            max_tokens=int(os.getenv("MAX_TOKENS", "8192")),
            api_key_env=os.getenv("API_KEY_ENV", "GOOGLE_API_KEY"),
            currency=os.getenv("CURRENCY", "INR"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "20")),
        )

    def api_key(self) -> str | None:
        # API_KEY is the legacy variable name used by earlier deployments
        return os.getenv(self.api_key_env) or os.getenv("API_KEY")
