# anima/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from anima.core import config
from anima.api.routers.health import router as health_router
from anima.api.routers.providers import router as providers_router
from anima.api.routers.chat import router as chat_router


def create_app() -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Anima Chat Relay", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(health_router)
    app.include_router(providers_router)
    app.include_router(chat_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("anima.main:app", host=config.HOST, port=config.PORT, reload=config.RELOAD)
