"""Static metadata describing QuizLock."""

APP_NAME = "QuizLock"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizLock runs timed, proctored quiz sessions in a locked full-screen window. "
    "Each question has its own countdown and leaving full screen for too long submits the attempt."
)

RULES_TEXT = (
    "The quiz runs in full screen. Each question has {budget} seconds.\n\n"
    "Leaving full screen or switching to another application shows a warning. "
    "Return within {grace} seconds or your answers are submitted automatically.\n\n"
    "Copy, paste, the context menu and developer tools are disabled during the quiz."
)
