from __future__ import annotations  # FastAPI server exposing the mock interview pipeline

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from config.registry import INTERVIEWER_KEY, bind_model, is_bound
from config.settings import settings
from llm_gateway import interviewer_model
from storage.migrate import migrate


logger = logging.getLogger(__name__)


def _startup() -> None:  # Prepare storage and bind the interviewer model
    migrate(settings.DB_PATH)
    if not is_bound(INTERVIEWER_KEY):
        bind_model(INTERVIEWER_KEY, interviewer_model())
        logger.info("Interviewer model bound to %s", settings.LLM_MODEL)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:  # Run startup hooks once per process
    _startup()
    yield


app = FastAPI(title="Mock Interview API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)
app.include_router(router)


@app.get("/api/health")
def health() -> Dict[str, str]:  # Liveness probe
    return {"status": "ok", "model": settings.LLM_MODEL}


if __name__ == "__main__":  # pragma: no cover - manual launch
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
