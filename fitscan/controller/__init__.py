"""Page state machine and session orchestration."""

from .pages import (
    LOADING_TIPS,
    CreatorPage,
    HomePage,
    LoadingPage,
    Page,
    ProfileSetupPage,
    ResultPage,
)
from .session_controller import SessionController
from .transitions import InvalidTransition

__all__ = [
    "LOADING_TIPS",
    "CreatorPage",
    "HomePage",
    "LoadingPage",
    "Page",
    "ProfileSetupPage",
    "ResultPage",
    "SessionController",
    "InvalidTransition",
]
