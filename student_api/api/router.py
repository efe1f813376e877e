from fastapi import APIRouter
from student_api.api.endpoints import students

api_router = APIRouter()

api_router.include_router(
    students.router,
    tags=["students"]
)
