from fastapi import APIRouter

from app.api.v1.endpoints import vigenere

api_router = APIRouter()

api_router.include_router(
    vigenere.router,
    prefix="/vigenere",
    tags=["Vigenère"],
)
