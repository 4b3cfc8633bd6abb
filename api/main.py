"""
Punto de entrada principal de la aplicacion FastAPI.
Configura la aplicacion, middlewares, rutas y eventos.
"""
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from index_duel import __version__
from index_duel.core.config import Settings, get_cors_origins
from index_duel.core.events import lifespan
from index_duel.api.v1.router import api_router
from index_duel.api.middlewares import ErrorHandlerMiddleware, RequestLoggingMiddleware
from index_duel.shared.exceptions.base import AppException


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """
    Factory para crear y configurar la aplicacion FastAPI.

    La configuracion se lee del entorno en el startup si no se pasa aqui, de
    modo que importar este modulo no requiere variables de entorno.

    Args:
        settings: Configuracion explicita (tests, scripts)

    Returns:
        FastAPI: Instancia configurada de la aplicacion
    """
    application = FastAPI(
        title=settings.APP_NAME if settings else "Index Duel Backend",
        version=settings.APP_VERSION if settings else __version__,
        description="Espejo local del catalogo de cartas y sincronizacion para clientes moviles",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.container = None

    # Log de peticiones y respuesta directa a OPTIONS
    application.add_middleware(RequestLoggingMiddleware)

    # Configurar CORS
    cors_origins = get_cors_origins(settings.CORS_ORIGINS) if settings else ["*"]
    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware personalizado para manejo de errores
    application.add_middleware(ErrorHandlerMiddleware)

    # Incluir routers de la API
    application.include_router(api_router, prefix="/api")

    # Manejador global de excepciones personalizadas
    @application.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": exc.details
            }
        )

    # Body malformado -> 400
    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "VALIDATION_ERROR",
                "message": "Invalid request body",
                "details": {"errors": jsonable_encoder(exc.errors())}
            }
        )

    return application


# Crear instancia de la aplicacion
app = create_application()


if __name__ == "__main__":
    import uvicorn

    from index_duel.core.config import get_settings

    settings = get_settings()

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
