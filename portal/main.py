from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from portal.config import settings
from portal.core.errors import register_error_handlers
from portal.db import Base, SessionLocal, engine
from portal.realtime.context import build_realtime_context
from portal.routers import auth, chat, connect_requests, directory, library, realtime, site

logging.basicConfig(
    level=getattr(logging, (settings.log_level or 'INFO').upper(), logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    app.state.realtime = build_realtime_context(SessionLocal)
    logger.info('portal_started env=%s', settings.app_env)
    yield
    logger.info('portal_stopped realtime_connections=%s', len(app.state.realtime.registry))
    app.state.realtime = None


app = FastAPI(title=settings.app_name, version='0.1.0', lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=False,
    allow_methods=['*'],
    allow_headers=['*'],
)


register_error_handlers(app)


@app.middleware('http')
async def slow_request_logger(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000.0
    if duration_ms >= settings.metrics_slow_ms:
        logging.getLogger('portal.request').info(
            'request_slow path=%s method=%s status_code=%s duration_ms=%.2f',
            request.url.path,
            request.method,
            response.status_code,
            duration_ms,
        )
    return response


app.include_router(auth.router)
app.include_router(directory.router)
app.include_router(connect_requests.router)
app.include_router(library.router)
app.include_router(chat.router)
app.include_router(realtime.router)
app.include_router(site.router)

_static_root = site.static_root()
if _static_root is not None:
    # Mounted last so API routes take precedence over same-named files.
    app.mount('/', StaticFiles(directory=str(_static_root)), name='static')


if __name__ == '__main__':
    import uvicorn

    uvicorn.run('portal.main:app', host=settings.host, port=settings.port)
