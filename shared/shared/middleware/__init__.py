from shared.middleware.error_handler import error_envelope_middleware, http_exception_handler
from shared.middleware.request_id import request_id_middleware

__all__ = ["error_envelope_middleware", "http_exception_handler", "request_id_middleware"]
