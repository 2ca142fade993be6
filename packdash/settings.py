import logging
import secrets
from urllib.parse import urlsplit

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_INSECURE_DEFAULT_KEY = "change-me-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="PACKDASH_", extra="ignore")

    db_url: str = "sqlite:///packdash.db"

    storage_backend: str = "local"
    storage_local_path: str = "./storage"

    supabase_url: str = ""
    supabase_key: str = ""

    s3_region: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_endpoint_url: str = ""

    signed_url_expiry: int = 3600  # 1 hour in seconds

    # Web routes only sign objects in these buckets and only redirect to these
    # hosts (plus the Supabase project host).
    files_allowed_buckets: list[str] = [
        "print-cards",
        "ncr-attachments",
        "product-request-files",
        "release-documents",
    ]
    files_allowed_hosts: list[str] = []

    log_level: str = "INFO"
    log_json: bool = False

    secret_key: str = _INSECURE_DEFAULT_KEY

    def redirect_hosts(self) -> set[str]:
        hosts = {host.lower() for host in self.files_allowed_hosts}
        supabase_host = urlsplit(self.supabase_url).hostname
        if supabase_host:
            hosts.add(supabase_host)
        return hosts

    def get_secret_key(self) -> str:
        if self.secret_key == _INSECURE_DEFAULT_KEY:
            logger.warning(
                "PACKDASH_SECRET_KEY is not set, using a random key. "
                "Sessions will not survive restarts. "
                "Set PACKDASH_SECRET_KEY in your environment or .env file."
            )
            self.secret_key = secrets.token_urlsafe(32)
        return self.secret_key


settings = Settings()
