import pytest

from config import GatewayConfig
from errors import NotConfigured


def test_defaults():
    cfg = GatewayConfig.from_env({})
    assert cfg.bucket is None
    assert cfg.endpoint_url is None
    assert cfg.auth_password is None
    assert cfg.redirect_ttl == 30
    assert cfg.action_ttl == 3600
    assert cfg.base_path == "/api"
    assert not cfg.actions_blocked


def test_r2_endpoint_from_account():
    cfg = GatewayConfig.from_env({"R2_ACCOUNT_ID": "abc123", "R2_BUCKET_NAME": "files"})
    assert cfg.endpoint_url == "https://abc123.r2.cloudflarestorage.com"
    assert cfg.bucket == "files"


def test_explicit_endpoint_wins():
    cfg = GatewayConfig.from_env({"R2_ACCOUNT_ID": "abc123", "STORAGE_ENDPOINT": "http://localhost:9000"})
    assert cfg.endpoint_url == "http://localhost:9000"


def test_production_tier_blocks_actions():
    assert GatewayConfig.from_env({"DEPLOY_ENV": "Production"}).actions_blocked
    assert not GatewayConfig.from_env({"DEPLOY_ENV": "preview"}).actions_blocked


def test_custom_blocked_tiers():
    env = {"DEPLOY_ENV": "preview", "BLOCKED_TIERS": "preview, staging"}
    cfg = GatewayConfig.from_env(env)
    assert cfg.blocked_tiers == ("preview", "staging")
    assert cfg.actions_blocked


def test_empty_values_are_unset():
    cfg = GatewayConfig.from_env({"AUTH_PASSWORD": "", "R2_BUCKET_NAME": ""})
    assert cfg.auth_password is None
    assert cfg.bucket is None


def test_ttls_and_base_path():
    cfg = GatewayConfig.from_env({"REDIRECT_URL_TTL_SECONDS": "10", "ACTION_URL_TTL_SECONDS": "600",
                                  "API_BASE_PATH": "/files/"})
    assert (cfg.redirect_ttl, cfg.action_ttl, cfg.base_path) == (10, 600, "/files")


@pytest.mark.parametrize("value", ["1h", "", "2.5", "0", "-30"])
def test_bad_ttl_is_not_configured(value):
    with pytest.raises(NotConfigured) as exc:
        GatewayConfig.from_env({"REDIRECT_URL_TTL_SECONDS": value})
    assert "REDIRECT_URL_TTL_SECONDS" in exc.value.message
