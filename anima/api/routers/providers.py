from fastapi import APIRouter

from anima.core import config
from anima.providers.factory import available_providers, get_provider
from anima.schemas.chat import ProvidersResponse

router = APIRouter(prefix="/api", tags=["providers"])


@router.get("/providers", response_model=ProvidersResponse)
def list_providers() -> ProvidersResponse:
    providers = {name: get_provider(name) for name in available_providers()}
    return ProvidersResponse(
        providers=list(providers),
        default_provider=config.PROVIDER,
        default_models={name: p.default_model for name, p in providers.items()},
        models={name: p.models for name, p in providers.items()},
    )
