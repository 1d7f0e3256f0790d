# app/api/routers.py
from fastapi import APIRouter
from app.api.v1.endpoints import admin_cards, cards

router = APIRouter()

router.include_router(admin_cards.router)
router.include_router(cards.router)
