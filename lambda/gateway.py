import hmac, json, logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import unquote

from config import GatewayConfig
from errors import (BadRequest, Forbidden, GatewayError, MethodNotAllowed,
                    NotConfigured, NotFound, Unauthorized)
from store import GET, PUT, ObjectStore

log = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST, OPTIONS"
CORS = {"access-control-allow-origin": "*"}
PREFLIGHT = {
    **CORS,
    "access-control-allow-methods": ALLOWED_METHODS,
    "access-control-allow-headers": "Content-Type",
    "access-control-max-age": "86400",
}
DOWNLOAD_PREFIX = "/download/"


@dataclass
class Request:
    method: str
    path: str
    body: Optional[str] = None


@dataclass
class Response:
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


class Action(Enum):
    LIST_FILES = "list-files"
    GENERATE_UPLOAD_URL = "generate-upload-url"
    GENERATE_DOWNLOAD_URL = "generate-download-url"


def ok(data, code=200):
    return Response(code, {"content-type": "application/json", **CORS}, json.dumps(data))

def fail(code, msg, **headers):
    return Response(code, {"content-type": "text/plain; charset=utf-8", **CORS, **headers}, msg)


def handle(request: Request, config: GatewayConfig, store: ObjectStore) -> Response:
    method = request.method.upper()
    if method == "OPTIONS":
        return Response(204, dict(PREFLIGHT))

    try:
        path = strip_base(request.path, config.base_path)
        if method == "GET":
            return download(path, config, store)
        if method == "POST":
            return run_action(path, request.body, config, store)
        raise MethodNotAllowed()
    except GatewayError as e:
        if e.status >= 500:
            log.error("%s %s failed: %s", method, request.path, e.message, exc_info=True)
        else:
            log.warning("%s %s rejected: %d %s", method, request.path, e.status, e.message)
        extra = {"allow": ALLOWED_METHODS} if isinstance(e, MethodNotAllowed) else {}
        return fail(e.status, e.message, **extra)
    except Exception as e:
        log.exception("%s %s crashed", method, request.path)
        return fail(500, f"internal server error: {e}")


def strip_base(path: str, base: str) -> str:
    path = path or "/"
    if base and (path == base or path.startswith(base + "/")):
        path = path[len(base):]
    return path or "/"


# ---- GET /download/<key> ----

def download(path: str, config: GatewayConfig, store: ObjectStore) -> Response:
    """
    Public share link: no password, the short TTL is the only protection.
    The key is everything after /download/, percent-decoded once, so
    /download/a/b.txt and /download/a%2Fb.txt name the same object.
    """
    if not path.startswith(DOWNLOAD_PREFIX):
        raise NotFound()
    key = unquote(path[len(DOWNLOAD_PREFIX):])
    if not key:
        raise BadRequest("filename is required")

    url = store.presign(GET, key, config.redirect_ttl)
    log.info("redirecting download of %s (ttl=%ss)", key, config.redirect_ttl)
    return Response(302, {"location": url, "cache-control": "no-store", **CORS})


# ---- POST action endpoint ----

def parse_body(raw: Optional[str]) -> Dict[str, Any]:
    try:
        body = json.loads(raw or "{}")
    except ValueError:
        raise BadRequest("body must be JSON")
    if not isinstance(body, dict):
        raise BadRequest("body must be a JSON object")
    return body

def authorize(config: GatewayConfig, password) -> None:
    if not config.auth_password:
        raise NotConfigured("auth password not configured")
    if not isinstance(password, str) or not hmac.compare_digest(
            password.encode(), config.auth_password.encode()):
        raise Unauthorized()

def resolve_action(path: str, body: Dict[str, Any]) -> Action:
    name = body.get("action")
    if name is None and path.strip("/"):
        # route-based variant: POST /api/<action>
        name = path.rstrip("/").rsplit("/", 1)[-1]
    try:
        return Action(name)
    except ValueError:
        raise NotFound("action not found")

def run_action(path: str, raw_body: Optional[str], config: GatewayConfig, store: ObjectStore) -> Response:
    if config.actions_blocked:
        raise Forbidden(f"actions are disabled in {config.deploy_env}")
    body = parse_body(raw_body)
    authorize(config, body.get("password"))
    action = resolve_action(path, body)
    log.info("action %s", action.value)
    return ACTIONS[action](body, config, store)


def required(body, *names):
    values = [body.get(n) for n in names]
    if not all(isinstance(v, str) and v for v in values):
        raise BadRequest(" and ".join(names) + (" are" if len(names) > 1 else " is") + " required")
    return values


def list_files(body, config, store):
    return ok({"files": [obj.to_json() for obj in store.list_objects()]})

def generate_upload_url(body, config, store):
    filename, content_type = required(body, "filename", "contentType")
    url = store.presign(PUT, filename, config.action_ttl, content_type=content_type)
    return ok({"url": url, "expiresIn": config.action_ttl})

def generate_download_url(body, config, store):
    filename, = required(body, "filename")
    url = store.presign(GET, filename, config.action_ttl)
    return ok({"url": url, "expiresIn": config.action_ttl})


ACTIONS = {
    Action.LIST_FILES: list_files,
    Action.GENERATE_UPLOAD_URL: generate_upload_url,
    Action.GENERATE_DOWNLOAD_URL: generate_download_url,
}
