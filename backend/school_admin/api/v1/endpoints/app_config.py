"""School configuration loaded from the backend at start-up."""

from fastapi import APIRouter, Depends

from school_admin.core.config import AppConfig, get_app_config

router = APIRouter(tags=["Config"])


@router.get("/config", response_model=AppConfig)
async def read_app_config(app_config: AppConfig = Depends(get_app_config)) -> AppConfig:
    """Terms per session and currency, as fetched once when the service started."""
    return app_config
