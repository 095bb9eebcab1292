from fastapi import APIRouter

from ..state import app_state

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {
        "status": "ok",
        "records": len(app_state.dataset),
        "generation": app_state.generation,
        "load_error": app_state.notice is not None,
    }
