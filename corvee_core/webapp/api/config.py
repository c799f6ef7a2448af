from __future__ import annotations

from fastapi import APIRouter, Depends

from ..container import ServiceContainer
from ..dependencies import get_container
from ..schemas import ConfigPayload

router = APIRouter()


@router.get("/", response_model=ConfigPayload)
def get_config(container: ServiceContainer = Depends(get_container)) -> ConfigPayload:
    cfg = container.config
    return ConfigPayload(
        general={
            "default_locale": cfg.general.default_locale,
            "name_width": cfg.general.name_width,
            "seed_defaults": cfg.general.seed_defaults,
            "default_color": cfg.general.default_color,
            "day_format": cfg.general.day_format,
        },
        tasks={
            "min_weight": cfg.tasks.min_weight,
            "max_weight": cfg.tasks.max_weight,
        },
        history={"undo_depth": cfg.history.undo_depth},
    )
