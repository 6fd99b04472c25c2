from fastapi import APIRouter

from ats_server.api.v1.artifacts import router as artifacts_router
from ats_server.api.v1.generate import router as generate_router
from ats_server.api.v1.job_materials import router as job_materials_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(generate_router)
api_v1_router.include_router(artifacts_router)
api_v1_router.include_router(job_materials_router)
