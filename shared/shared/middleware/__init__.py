from shared.middleware.request_id import request_id_middleware, request_id_var
from shared.middleware.error_handler import error_envelope_middleware, install_error_handlers

__all__ = [
    "request_id_middleware",
    "request_id_var",
    "error_envelope_middleware",
    "install_error_handlers",
]
