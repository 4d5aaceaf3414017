import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Bookstore API
    api_base_url: str = os.getenv("CATALOG_API_URL", "http://localhost:8080")
    api_prefix: str = os.getenv("CATALOG_API_PREFIX", "/api/v1")

    # HTTP client
    request_timeout: float = float(os.getenv("CATALOG_TIMEOUT", "10"))
    connect_timeout: float = float(os.getenv("CATALOG_CONNECT_TIMEOUT", "5"))
    retry_attempts: int = int(os.getenv("CATALOG_RETRY_ATTEMPTS", "3"))
    retry_backoff: float = float(os.getenv("CATALOG_RETRY_BACKOFF", "0.5"))

    # Application
    app_name: str = os.getenv("APP_NAME", "Catalog Browser")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")
    output_mode: str = os.getenv("CATALOG_CLI_OUTPUT", "plain")

    def api_url(self, path: str) -> str:
        """Join the base URL, the versioned prefix and ``path``."""
        base = self.api_base_url.rstrip("/")
        prefix = "/" + self.api_prefix.strip("/") if self.api_prefix.strip("/") else ""
        return f"{base}{prefix}/{path.lstrip('/')}"

    def root_url(self, path: str) -> str:
        return f"{self.api_base_url.rstrip('/')}/{path.lstrip('/')}"


settings = Settings()
