from dotenv import load_dotenv
from fastapi import FastAPI

from .api import create_control_router
from .chaos import ChaosEngine
from .config import get_settings, load_engine_options
from .middleware import install_chaos
from .models import HealthResponse

load_dotenv()

settings = get_settings()

app = FastAPI(
    title="NaaS API",
    description="Sample service with probabilistic error and latency injection",
    version="1.0.0",
)

# Health probes and the control surface must stay reachable while chaos is on
PROTECTED_ROUTES = ["/api/health", "/api/chaos"]


def build_engine_options(options: dict) -> dict:
    """Add the protected routes to whatever exclude list the loaded options carry."""
    options = dict(options)
    excluded = [*(options.pop("excludeRoutes", None) or []), *(options.pop("exclude_routes", None) or [])]
    options["excludeRoutes"] = [*excluded, *(route for route in PROTECTED_ROUTES if route not in excluded)]
    return options


engine_options = build_engine_options(load_engine_options(settings))
engine = ChaosEngine(engine_options, environment=settings.environment)
install_chaos(app, engine)


@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@app.api_route("/api/echo/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
def echo(path: str):
    return {"success": True, "path": f"/{path}"}


app.include_router(create_control_router(engine), prefix="/api/chaos", tags=["chaos"])
