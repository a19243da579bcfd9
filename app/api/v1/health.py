from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check(request: Request):
    state = request.app.state
    return {
        "status": "healthy",
        "database": getattr(state, "supabase", None) is not None,
        "ai": getattr(state, "ai_client", None) is not None,
    }
