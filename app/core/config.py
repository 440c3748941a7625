import json
import os
from pathlib import Path
from typing import Annotated, List, Union, Optional
from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, NoDecode
from dotenv import load_dotenv

from app.core.errors import ConfigError

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Razorpay Checkout")

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    # Proxies whose X-Forwarded-For is trusted for the client address; "*" trusts any.
    FORWARDED_ALLOW_IPS: str = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")

    RAZORPAY_KEY_ID: Optional[str] = os.getenv("RAZORPAY_KEY_ID")
    RAZORPAY_KEY_SECRET: Optional[str] = os.getenv("RAZORPAY_KEY_SECRET")
    # The dashboard calls it "webhook secret"; older deployments used the prefixed name.
    WEBHOOK_SECRET: str = os.getenv("WEBHOOK_SECRET") or os.getenv("RAZORPAY_WEBHOOK_SECRET", "")

    STATIC_DIR: str = os.getenv("STATIC_DIR", str(BASE_DIR / "public"))

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    MAX_BODY_BYTES: int = 100 * 1024

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[Union[str, AnyHttpUrl]], NoDecode] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, str):
            return json.loads(v)
        elif isinstance(v, list):
            return v
        raise ValueError(v)

    def require_gateway_credentials(self) -> None:
        """
        Fail fast when the gateway cannot be used at all.
        The webhook secret is optional and only checked by the caller.
        """
        missing = [
            name
            for name in ("RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigError(f"Missing {' or '.join(missing)} in env")

    class Config:
        case_sensitive = True


settings = Settings()
