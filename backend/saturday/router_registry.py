"""Central router registry."""
from __future__ import annotations

from fastapi import FastAPI

from saturday.routers.auth import router as auth_router
from saturday.routers.availability import router as availability_router
from saturday.routers.conversations import messages_router, router as conversations_router
from saturday.routers.organizations import router as organizations_router
from saturday.routers.pregames import router as pregames_router
from saturday.routers.reviews import router as reviews_router
from saturday.routers.schools import router as schools_router
from saturday.routers.users import router as users_router

ALL_ROUTERS = (
    auth_router,
    availability_router,
    schools_router,
    users_router,
    organizations_router,
    conversations_router,
    messages_router,
    pregames_router,
    reviews_router,
)


def include_all_routers(app: FastAPI) -> None:
    for router in ALL_ROUTERS:
        app.include_router(router)
