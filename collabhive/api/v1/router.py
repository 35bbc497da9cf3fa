from fastapi import APIRouter

from collabhive.api.v1.endpoints import collaboration, profiles, projects

api_router = APIRouter()

api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(
    collaboration.router, prefix="/collaboration", tags=["collaboration"]
)
api_router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
