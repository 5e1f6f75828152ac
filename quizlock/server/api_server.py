"""FastAPI development stand-in for the quiz content and scoring service."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Thread
import time

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
import uvicorn

from quizlock.constants.network_constants import DEV_SERVER_HOST, DEV_SERVER_PORT, DEV_SERVER_TOKEN
from quizlock.core.schemas import AggregateStats, MessagePayload, QuizStatusPayload, ScoreReport, SubmitPayload
from quizlock.server.quiz_importer import load_quiz_from_file
from quizlock.server.quiz_store import QuizStore, StoreError

_DATA_DIR = Path(__file__).resolve().parents[1] / "data"
logger = logging.getLogger(__name__)


def build_default_store(token: str = DEV_SERVER_TOKEN) -> QuizStore:
    """Store seeded with the bundled sample quizzes and one learner account."""
    store = QuizStore()
    for quiz_file in sorted(_DATA_DIR.glob("*.txt")):
        store.add_quiz(load_quiz_from_file(quiz_file))
    store.add_user(token, user_id="learner", balance=0)
    return store


def _get_store_dependency(store: QuizStore):
    def dependency() -> QuizStore:
        return store

    return dependency


def create_api_app(store: QuizStore) -> FastAPI:
    """Create a FastAPI application wired to the provided store."""
    app = FastAPI(title="QuizLock development service", version="0.1.0")
    store_dep = _get_store_dependency(store)

    def current_user(
        authorization: str | None = Header(default=None),
        quiz_store: QuizStore = Depends(store_dep),
    ) -> str:
        scheme, _, token = (authorization or "").partition(" ")
        user_id = quiz_store.user_for_token(token) if scheme.lower() == "bearer" else None
        if user_id is None:
            raise HTTPException(status_code=401, detail="Not authorized")
        return user_id

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc)})

    @app.exception_handler(HTTPException)
    async def handle_http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

    @app.get("/quiz/status/me", response_model=list[QuizStatusPayload])
    def quiz_status(
        user_id: str = Depends(current_user),
        quiz_store: QuizStore = Depends(store_dep),
    ) -> list[QuizStatusPayload]:
        return quiz_store.status_for(user_id)

    @app.post("/quiz/register/{quiz_id}", response_model=MessagePayload)
    def register(
        quiz_id: str,
        user_id: str = Depends(current_user),
        quiz_store: QuizStore = Depends(store_dep),
    ) -> MessagePayload:
        quiz_store.register(user_id, quiz_id)
        return MessagePayload(message="Registered successfully")

    @app.post("/quiz/submit/{quiz_id}", response_model=ScoreReport, response_model_exclude_none=True)
    def submit(
        quiz_id: str,
        payload: SubmitPayload,
        user_id: str = Depends(current_user),
        quiz_store: QuizStore = Depends(store_dep),
    ) -> ScoreReport:
        return quiz_store.submit(user_id, quiz_id, payload.answers, payload.violations)

    @app.get("/quiz/{quiz_id}/analytics", response_model=AggregateStats)
    def analytics(
        quiz_id: str,
        user_id: str = Depends(current_user),
        quiz_store: QuizStore = Depends(store_dep),
    ) -> AggregateStats:
        return quiz_store.analytics(quiz_id)

    return app


def start_api_server(
    store: QuizStore,
    host: str = DEV_SERVER_HOST,
    port: int = DEV_SERVER_PORT,
    startup_timeout: float = 5.0,
) -> Thread:
    """Start the FastAPI server in a background daemon thread and wait until it accepts requests."""
    app = create_api_app(store)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizDevService", daemon=True)
    thread.start()
    deadline = time.monotonic() + startup_timeout
    while not server.started and thread.is_alive() and time.monotonic() < deadline:
        time.sleep(0.05)
    if not server.started:
        logger.warning("Development service did not report startup within %.1fs", startup_timeout)
    return thread
