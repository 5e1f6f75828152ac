"""Application entry point for the QuizLock learner client."""

from __future__ import annotations

import os
import sys

from PySide6.QtWidgets import QApplication

from quizlock.constants.network_constants import (
    API_TOKEN_ENV_VAR,
    API_URL_ENV_VAR,
    DEV_SERVER_HOST,
    DEV_SERVER_PORT,
    DEV_SERVER_TOKEN,
)
from quizlock.core.services.submission_client import SubmissionClient
from quizlock.server.api_server import build_default_store, start_api_server
from quizlock.ui.quiz_main_window import QuizMainWindow
from quizlock.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, connect to the quiz service, and launch the Qt UI.

    Without ``QUIZLOCK_API_URL`` the bundled development service is started
    on localhost and the client signs in as its sample learner.
    """
    logger = configure_logging()
    logger.info("Starting QuizLock…")

    base_url = os.environ.get(API_URL_ENV_VAR)
    token = os.environ.get(API_TOKEN_ENV_VAR)
    if not base_url:
        token = token or DEV_SERVER_TOKEN
        start_api_server(build_default_store(token), host=DEV_SERVER_HOST, port=DEV_SERVER_PORT)
        base_url = f"http://{DEV_SERVER_HOST}:{DEV_SERVER_PORT}"
        logger.info("Development quiz service running at %s", base_url)
    elif not token:
        logger.warning("%s is not set; requests will be rejected as unauthorized", API_TOKEN_ENV_VAR)

    client = SubmissionClient(base_url, token)

    app = QApplication(sys.argv)
    window = QuizMainWindow(client)
    window.show()
    window.controller.load_quizzes()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
