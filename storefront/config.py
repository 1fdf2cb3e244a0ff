import os

from storefront.errors import ConfigError


class Config:
    def __init__(self):
        # Commerce API
        self.API_ENDPOINT = os.environ.get("API_ENDPOINT", "http://localhost:8082/api/v1").rstrip("/")
        self.REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "30"))

        # Retry configuration (idempotent reads only)
        self.MAX_RETRIES = int(os.environ.get("MAX_RETRIES", "2"))
        self.RETRY_BACKOFF = float(os.environ.get("RETRY_BACKOFF", "1.5"))

        # Search and catalog
        self.SEARCH_DEBOUNCE_MS = int(os.environ.get("SEARCH_DEBOUNCE_MS", "300"))
        self.CATALOG_MAX_AGE = float(os.environ.get("CATALOG_MAX_AGE", "300"))

        # Error tracking
        self.SENTRY_DSN = os.environ.get("SENTRY_DSN", "")
        self.ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

        # Application settings
        self.DEBUG = os.environ.get("DEBUG", "false").lower() == "true"
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @property
    def has_sentry(self) -> bool:
        return bool(self.SENTRY_DSN)

    def validate(self):
        """Raise ConfigError if a setting cannot be used."""
        if not self.API_ENDPOINT:
            raise ConfigError("API_ENDPOINT must be set")
        if not self.API_ENDPOINT.startswith(("http://", "https://")):
            raise ConfigError(f"API_ENDPOINT must be an http(s) URL, got '{self.API_ENDPOINT}'")
        if self.SEARCH_DEBOUNCE_MS < 0:
            raise ConfigError("SEARCH_DEBOUNCE_MS cannot be negative")
        if self.MAX_RETRIES < 0:
            raise ConfigError("MAX_RETRIES cannot be negative")
        if self.REQUEST_TIMEOUT <= 0:
            raise ConfigError("REQUEST_TIMEOUT must be positive")

# Create an instance
config = Config()
