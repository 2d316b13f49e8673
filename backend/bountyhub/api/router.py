from fastapi import APIRouter

from bountyhub.api.auth import router as auth_router
from bountyhub.api.bounties import router as bounties_router
from bountyhub.api.chats import router as chats_router
from bountyhub.api.companies import router as companies_router
from bountyhub.api.reports import router as reports_router
from bountyhub.api.settings import router as settings_router
from bountyhub.api.users import router as users_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(users_router)
router.include_router(companies_router)
router.include_router(bounties_router)
router.include_router(reports_router)
router.include_router(chats_router)
router.include_router(settings_router)


@router.get("/ping")
def ping():
    return {"message": "pong", "alive": True}
