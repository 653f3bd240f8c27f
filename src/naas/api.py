"""HTTP control surface for a running chaos engine."""

from fastapi import APIRouter, HTTPException

from .chaos import VERSION, ChaosEngine, ConfigError
from .models import ConfigUpdateRequest, StatsResponse

# Callables and logger objects have no JSON form
_RUNTIME_ONLY = {"custom_chaos": True, "logging": {"logger"}}


def stats_payload(engine: ChaosEngine) -> StatsResponse:
    state = engine.state
    config = state.config
    data = config.model_dump(mode="json", exclude=_RUNTIME_ONLY)
    data["custom_chaos"] = len(config.custom_chaos)
    return StatsResponse(
        config=data,
        environment=engine.environment,
        version=VERSION,
        disabled=state.saved_error_rate is not None,
    )


def create_control_router(engine: ChaosEngine) -> APIRouter:
    """Routes to inspect, suspend, resume and reconfigure ``engine``."""
    router = APIRouter()

    @router.get("/stats", response_model=StatsResponse)
    def get_stats():
        return stats_payload(engine)

    @router.post("/disable", response_model=StatsResponse)
    def disable():
        engine.disable()
        return stats_payload(engine)

    @router.post("/enable", response_model=StatsResponse)
    def enable():
        engine.enable()
        return stats_payload(engine)

    @router.patch("/config", response_model=StatsResponse)
    def update_config(request: ConfigUpdateRequest):
        try:
            engine.update_config(request.changes())
        except ConfigError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return stats_payload(engine)

    return router
