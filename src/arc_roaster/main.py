import json
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .errors import InternalError, InvalidInput, RoastError
from .logging_config import RequestIdMiddleware, configure_logging
from .observability import configure_tracer
from .schemas import ErrorResponse, RoastResult
from .service import RoastService
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def _error_response(exc: RoastError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={'error': exc.message})


async def roast_error_handler(request: Request, exc: RoastError) -> JSONResponse:
    return _error_response(exc)


def create_app(
    settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None
) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        # bounded() owns every upstream deadline, so the client itself never times out
        async with httpx.AsyncClient(transport=transport, timeout=None) as client:
            app.state.roaster = RoastService(settings, client, tracer=configure_tracer(settings))
            yield

    app = FastAPI(
        title='ARC Roaster',
        description='AI-powered wallet roaster for Arc Testnet',
        version='0.1.0',
        lifespan=lifespan,
    )
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(RoastError, roast_error_handler)

    @app.get('/health')
    def health() -> dict[str, str]:
        return {'status': 'ok'}

    @app.post(
        '/api/roast',
        response_model=RoastResult,
        responses={400: {'model': ErrorResponse}, 502: {'model': ErrorResponse}, 500: {'model': ErrorResponse}},
    )
    async def roast(request: Request) -> RoastResult:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidInput('Invalid JSON body') from exc

        address = body.get('address') if isinstance(body, dict) else None
        try:
            return await request.app.state.roaster.roast(address)
        except RoastError:
            raise
        except Exception as exc:
            logger.exception('unexpected error while roasting', extra={'event': 'roast_failed'})
            raise InternalError(str(exc) or 'Unexpected error') from exc

    return app


app = create_app()
