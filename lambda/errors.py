class GatewayError(Exception):
    status = 500
    message = "internal server error"

    def __init__(self, message=None):
        self.message = message or self.message
        super().__init__(self.message)


class BadRequest(GatewayError):
    status = 400
    message = "bad request"


class Unauthorized(GatewayError):
    status = 401
    message = "unauthorized"


class Forbidden(GatewayError):
    status = 403
    message = "forbidden"


class NotFound(GatewayError):
    status = 404
    message = "not found"


class MethodNotAllowed(GatewayError):
    status = 405
    message = "method not allowed"


class NotConfigured(GatewayError):
    status = 500
    message = "not configured"


class UpstreamFailure(GatewayError):
    """Storage provider call failed (botocore client or transport error)."""
    status = 500
    message = "storage request failed"
