import os, base64, logging

from config import GatewayConfig
from errors import GatewayError
from gateway import Request, Response, fail, handle
from store import S3ObjectStore

log = logging.getLogger()
log.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())


def to_request(event) -> Request:
    """API Gateway HTTP API (payload v2) event -> Request. v1 REST events also work."""
    http = event.get("requestContext", {}).get("http", {})
    method = http.get("method") or event.get("httpMethod") or "GET"
    path = event.get("rawPath") or event.get("path") or "/"

    body = event.get("body")
    if body is not None and event.get("isBase64Encoded"):
        body = base64.b64decode(body, validate=True).decode("utf-8")

    return Request(method=method, path=path, body=body)


def to_proxy(resp: Response):
    return {"statusCode": resp.status, "headers": resp.headers, "body": resp.body}


def main(event, _):
    try:
        config = GatewayConfig.from_env(os.environ)
    except GatewayError as e:
        log.error("bad configuration: %s", e.message, exc_info=True)
        return to_proxy(fail(e.status, e.message))
    try:
        req = to_request(event)
    except ValueError as e:
        # undecodable base64 / utf-8 body
        log.warning("bad event body: %s", e)
        return to_proxy(fail(400, "bad request"))
    return to_proxy(handle(req, config, S3ObjectStore(config)))
