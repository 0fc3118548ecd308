from fastapi import Depends, FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from app.api.agents import router as agents_router
from app.api.clients import router as clients_router
from app.api.dashboard import router as dashboard_router
from app.api.evaluations import router as evaluations_router
from app.api.monthly import router as monthly_router
from app.api.performance import router as performance_router
from app.api.products import router as products_router
from app.errors import register_error_handlers
from app.logging import configure_logging
from app.observability import ObservabilityMiddleware
from app.services.auth_dependencies import require_user_auth
from app.telemetry import setup_otel

configure_logging()

app = FastAPI(title="Brokerage Dashboard API")

setup_otel(app)
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(dashboard_router, dependencies=[Depends(require_user_auth)])
_include_api_router(clients_router, dependencies=[Depends(require_user_auth)])
_include_api_router(agents_router, dependencies=[Depends(require_user_auth)])
_include_api_router(products_router, dependencies=[Depends(require_user_auth)])
_include_api_router(performance_router, dependencies=[Depends(require_user_auth)])
_include_api_router(evaluations_router, dependencies=[Depends(require_user_auth)])
_include_api_router(monthly_router, dependencies=[Depends(require_user_auth)])


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.head("/health")
def head_health():
    return Response(status_code=200)


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
