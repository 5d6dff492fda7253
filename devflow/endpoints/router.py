from fastapi import APIRouter

from devflow.endpoints.v1 import (
    auth_api,
    users_api,
    organizations_api,
    teams_api,
    projects_api,
    sprints_api,
    tasks_api,
    comments_api,
    notifications_api,
    ws_api,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(auth_api.router)
api_router.include_router(users_api.router)
api_router.include_router(organizations_api.router)
api_router.include_router(teams_api.router)
api_router.include_router(projects_api.router)
api_router.include_router(sprints_api.router)
api_router.include_router(tasks_api.router)
api_router.include_router(comments_api.router)
api_router.include_router(notifications_api.router)

# Mounted at the root, outside /api
ws_router = ws_api.router
