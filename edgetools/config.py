import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=False)


def _as_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    cloudflare_account_id: str | None
    cloudflare_email: str | None
    cloudflare_api_key: str | None
    cloudflare_namespace_id: str | None
    cloudflare_api_base_url: str
    r2_bucket_name: str
    r2_public_url: str | None
    tts_model: str
    summarize_model: str
    summarize_max_tokens: int
    upstream_timeout_seconds: int
    scrape_timeout_seconds: int
    default_audio_mime_type: str
    log_level: str


def load_settings() -> Settings:
    return Settings(
        cloudflare_account_id=(os.getenv("CLOUDFLARE_ACCOUNT_ID") or None),
        cloudflare_email=(os.getenv("CLOUDFLARE_EMAIL") or None),
        cloudflare_api_key=(os.getenv("CLOUDFLARE_API_KEY") or None),
        cloudflare_namespace_id=(os.getenv("CLOUDFLARE_NAMESPACE_ID") or None),
        cloudflare_api_base_url=os.getenv(
            "CLOUDFLARE_API_BASE_URL", "https://api.cloudflare.com/client/v4"
        ),
        r2_bucket_name=os.getenv("R2_BUCKET_NAME", "uploads"),
        r2_public_url=(os.getenv("R2_PUBLIC_URL") or None),
        tts_model=os.getenv("TTS_MODEL", "@cf/myshell-ai/melotts"),
        summarize_model=os.getenv("SUMMARIZE_MODEL", "@cf/facebook/bart-large-cnn"),
        summarize_max_tokens=max(
            1, min(1024, _as_int(os.getenv("SUMMARIZE_MAX_TOKENS"), 100))
        ),
        upstream_timeout_seconds=max(
            1, _as_int(os.getenv("UPSTREAM_TIMEOUT_SECONDS"), 30)
        ),
        scrape_timeout_seconds=max(
            1, _as_int(os.getenv("SCRAPE_TIMEOUT_SECONDS"), 10)
        ),
        default_audio_mime_type=os.getenv("DEFAULT_AUDIO_MIME_TYPE", "audio/mp3")
        .strip()
        .lower(),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )


settings = load_settings()
