import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from errors import NotConfigured

R2_ENDPOINT = "https://{account}.r2.cloudflarestorage.com"


def ttl(environ, name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        seconds = int(raw)
    except ValueError:
        raise NotConfigured(f"{name} must be a whole number of seconds, got {raw!r}")
    if seconds <= 0:
        raise NotConfigured(f"{name} must be positive, got {seconds}")
    return seconds


@dataclass(frozen=True)
class GatewayConfig:
    bucket: Optional[str] = None
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: str = "auto"
    auth_password: Optional[str] = None
    deploy_env: str = "development"
    blocked_tiers: Tuple[str, ...] = ("production",)
    base_path: str = "/api"
    redirect_ttl: int = 30
    action_ttl: int = 3600

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> "GatewayConfig":
        endpoint = environ.get("STORAGE_ENDPOINT")
        account = environ.get("R2_ACCOUNT_ID")
        if not endpoint and account:
            endpoint = R2_ENDPOINT.format(account=account)

        tiers = environ.get("BLOCKED_TIERS", "production")
        return cls(
            bucket=environ.get("R2_BUCKET_NAME") or None,
            endpoint_url=endpoint or None,
            access_key_id=environ.get("R2_ACCESS_KEY_ID") or None,
            secret_access_key=environ.get("R2_SECRET_ACCESS_KEY") or None,
            region=environ.get("STORAGE_REGION", "auto"),
            auth_password=environ.get("AUTH_PASSWORD") or None,
            deploy_env=environ.get("DEPLOY_ENV", "development").strip().lower(),
            blocked_tiers=tuple(t.strip().lower() for t in tiers.split(",") if t.strip()),
            base_path=environ.get("API_BASE_PATH", "/api").rstrip("/"),
            redirect_ttl=ttl(environ, "REDIRECT_URL_TTL_SECONDS", 30),
            action_ttl=ttl(environ, "ACTION_URL_TTL_SECONDS", 3600),
        )

    @property
    def actions_blocked(self) -> bool:
        # every POST answers 403 in these tiers
        return self.deploy_env in self.blocked_tiers
