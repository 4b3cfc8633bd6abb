from index_duel.api.middlewares.error_handler import ErrorHandlerMiddleware
from index_duel.api.middlewares.request_logging import RequestLoggingMiddleware

__all__ = ["ErrorHandlerMiddleware", "RequestLoggingMiddleware"]
