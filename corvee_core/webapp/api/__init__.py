from fastapi import APIRouter

from . import config, people, schedule, system, tasks

router = APIRouter()
router.include_router(people.router, prefix="/people", tags=["people"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
router.include_router(config.router, prefix="/config", tags=["config"])
router.include_router(system.router, prefix="/system", tags=["system"])

__all__ = ["router"]
