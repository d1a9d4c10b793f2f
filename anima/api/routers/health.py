from fastapi import APIRouter

router = APIRouter(tags=["meta"])


# liveness only; upstream providers are not probed
@router.get("/health")
def health():
    return {"status": "ok"}
