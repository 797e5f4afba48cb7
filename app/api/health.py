from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Hello, World"}


@router.get("/api/v1")
async def api_v1():
    return {"message": "API v1"}
