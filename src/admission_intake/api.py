from fastapi import APIRouter

from admission_intake.modules.admissions import router as admissions_router

api_router = APIRouter()

api_router.include_router(admissions_router, tags=["Admissions"])
