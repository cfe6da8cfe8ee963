from pydantic import BaseModel
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Load .env file if it exists (before reading os.getenv)
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    with open(_env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                # Only set if not already in environment (env vars take precedence)
                if key not in os.environ:
                    os.environ[key] = value


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # Network
    host: str = os.getenv("TOOLKIT_HOST", "0.0.0.0")
    port: int = int(os.getenv("TOOLKIT_PORT", "8000"))

    # Site identity, used for titles and canonical/social URLs
    site_name: str = os.getenv("TOOLKIT_SITE_NAME", "Utility Toolkit")
    base_url: str = os.getenv("TOOLKIT_BASE_URL", "").rstrip("/")

    # Listing pages
    home_cards_per_category: int = int(os.getenv("TOOLKIT_HOME_CARDS", "8"))

    # Result affordances
    copy_feedback_seconds: float = float(os.getenv("TOOLKIT_COPY_FEEDBACK_SECONDS", "2.0"))
    share_enabled: bool = _env_flag("TOOLKIT_SHARE_ENABLED", "true")

    # Startup: how long a router waits for the registry before giving up
    ready_timeout_s: float = float(os.getenv("TOOLKIT_READY_TIMEOUT", "5.0"))

    @property
    def title_suffix(self) -> str:
        return f" - {self.site_name}"


settings = Settings()

logger.info(f"Config: site={settings.site_name!r}, base_url={settings.base_url or '(request origin)'}")
