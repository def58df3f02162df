from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from booking_flow.api.v1 import routes_auth, routes_booking, routes_booking_session, routes_catalog, routes_health
from booking_flow.clients.backend import create_http_client
from booking_flow.core.config import settings
from booking_flow.core.exceptions import BookingFlowError
from booking_flow.core.logger import configure_logging
from booking_flow.redis import close_redis
from booking_flow.schemas.envelope import Envelope, failed


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    app.state.http_client = create_http_client(settings)
    yield
    await app.state.http_client.aclose()
    await close_redis()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description=settings.PROJECT_DESCRIPTION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in (routes_health.router, routes_auth.router, routes_catalog.router,
                   routes_booking_session.router, routes_booking.router):
        app.include_router(router, prefix=settings.API_V1_PREFIX)

    @app.exception_handler(BookingFlowError)
    async def booking_flow_error_handler(request, ex: BookingFlowError):
        return JSONResponse(status_code=ex.status_code, content=failed(ex.message))

    @app.get("/", response_model=Envelope[None])
    async def root():
        return Envelope(success=True, message="Movie booking flow is running")
    return app


app = create_app()
