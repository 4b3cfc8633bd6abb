"""
Middleware de registro de peticiones.

Registra metodo, ruta y cliente de cada peticion. Las peticiones OPTIONS
(preflight) se responden con 200 sin llegar a los endpoints.
"""
from fastapi import Request, status
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        client = request.client.host if request.client else "-"
        logger.info(f"{request.method} {request.url.path} desde {client}")

        if request.method == "OPTIONS":
            return Response(status_code=status.HTTP_200_OK)

        return await call_next(request)
