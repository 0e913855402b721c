"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from school_admin.api.v1.endpoints import app_config, exam_questions, health, imports

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(app_config.router)
api_router.include_router(imports.router)
api_router.include_router(exam_questions.router)
