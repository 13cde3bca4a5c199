"""Centralized configuration — all env vars in one place."""

import os

# Fixed per-deployment prefix for cache keys, so rendezvous entries never
# collide with other users of the same cache.
DEFAULT_INSTANCE_ID = "c96d8ac6-e571-48bb-9e1f-58df18574e43"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Rendezvous storage
        self.instance_id: str = os.getenv("RENDEZVOUS_INSTANCE_ID", DEFAULT_INSTANCE_ID)
        self.ttl_seconds: int = int(os.getenv("RENDEZVOUS_TTL_SECONDS", "300"))
        self.db_path: str = os.getenv("RENDEZVOUS_DB_PATH", "data/rendezvous.sqlite3")
        self.ephemeral_status: str = os.getenv("EPHEMERAL_TIER_STATUS", "enabled")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of configuration problems worth a startup warning."""
        problems = []
        if not self.instance_id:
            problems.append("RENDEZVOUS_INSTANCE_ID is empty")
        if self.ttl_seconds <= 0:
            problems.append(f"RENDEZVOUS_TTL_SECONDS must be positive, got {self.ttl_seconds}")
        if self.ephemeral_status.lower() not in _KNOWN_STATUSES:
            problems.append(f"EPHEMERAL_TIER_STATUS={self.ephemeral_status} is not recognized")
        return problems


_KNOWN_STATUSES = {"enabled", "disabled", "scheduled_maintenance", "unknown"}

settings = Settings()
