"""Pure page transitions.

Every function takes the current page (plus inputs) and returns the next
page without side effects, so the whole flow can be exercised without a
rendering layer, a camera or a network.
"""

from dataclasses import replace
from typing import Any, Sequence, TypeVar

import pydantic

from ..errors import FitScanError, ValidationError
from ..models import BodyScan, FailureKind, GenerationResult, ImageFile, Pose, Profile
from .pages import (
    LOADING_TIPS,
    CreatorPage,
    HomePage,
    LoadingPage,
    Page,
    ProfileSetupPage,
    ResultPage,
)

P = TypeVar("P")


class InvalidTransition(FitScanError):
    """The action is not available on the current page."""
    pass


def expect_page(page: Page | None, page_type: type[P]) -> P:
    if not isinstance(page, page_type):
        current = type(page).__name__ if page is not None else "no page"
        raise InvalidTransition(f"Expected {page_type.__name__}, currently on {current}")
    return page


def initial_page(profile: Profile | None) -> Page:
    """Where startup lands: setup unless the profile is generation-ready."""
    if profile is None:
        return ProfileSetupPage()
    if not profile.is_generation_ready:
        return ProfileSetupPage(draft=profile.model_copy(deep=True))
    return HomePage()


def go_home() -> HomePage:
    return HomePage()


def open_profile(profile: Profile | None) -> ProfileSetupPage:
    draft = profile.model_copy(deep=True) if profile is not None else Profile()
    return ProfileSetupPage(draft=draft)


def open_creator() -> CreatorPage:
    return CreatorPage()


def can_show_error(page: Page | None) -> bool:
    return isinstance(page, (ProfileSetupPage, CreatorPage, ResultPage))


def with_error(page: Page, message: str | None) -> Page:
    """Surface a message in place, without changing page."""
    if not can_show_error(page):
        raise InvalidTransition(f"{type(page).__name__} cannot display errors")
    return replace(page, error=message)


# Profile setup

def update_draft(page: ProfileSetupPage, **fields: Any) -> ProfileSetupPage:
    """Apply edited profile fields to the draft."""
    page = expect_page(page, ProfileSetupPage)
    try:
        draft = Profile.model_validate({**page.draft.model_dump(), **fields})
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid value for {location}: {first['msg']}", field=location) from e
    return replace(page, draft=draft, error=None)


def scan_completed(page: ProfileSetupPage, scan: BodyScan) -> ProfileSetupPage:
    page = expect_page(page, ProfileSetupPage)
    return replace(page, draft=page.draft.model_copy(update={"body_scan": scan}), error=None)


def validate_draft(draft: Profile) -> None:
    if not draft.is_generation_ready:
        raise ValidationError(
            "Please complete your name, measurements, and the 3-angle body scan.",
            field=draft.missing_fields()[0],
        )


def profile_saved(page: ProfileSetupPage) -> CreatorPage:
    expect_page(page, ProfileSetupPage)
    return CreatorPage()


# Creator

def select_clothing(page: CreatorPage, image: ImageFile) -> CreatorPage:
    page = expect_page(page, CreatorPage)
    return replace(page, clothing=image, error=None)


def select_pose(page: CreatorPage, pose: Pose) -> CreatorPage:
    page = expect_page(page, CreatorPage)
    return replace(page, pose=Pose(pose))


def start_generation(page: CreatorPage, profile: Profile | None, request_id: int) -> LoadingPage:
    """Creator -> Loading, iff clothing is selected and the profile is ready.

    Raises:
        ValidationError: the caller keeps the Creator page and shows the message.
    """
    page = expect_page(page, CreatorPage)
    if page.clothing is None:
        raise ValidationError(
            "Please upload a clothing item and ensure your profile is complete.",
            field="clothing_image",
        )
    if profile is None or not profile.is_generation_ready:
        raise ValidationError(
            "Please complete the 3-angle body scan and measurements in your profile.",
            field="profile",
        )
    return LoadingPage(request_id=request_id, clothing=page.clothing, pose=page.pose)


def next_tip(page: LoadingPage, tips: Sequence[str] = LOADING_TIPS) -> LoadingPage:
    page = expect_page(page, LoadingPage)
    index = tips.index(page.tip) if page.tip in tips else -1
    return replace(page, tip=tips[(index + 1) % len(tips)])


def finish_generation(page: Page, request_id: int, result: GenerationResult) -> Page:
    """Loading -> Result on success, Loading -> Creator on failure.

    A result for a request the user has already navigated away from is
    discarded: the current page is returned unchanged.
    """
    if not isinstance(page, LoadingPage) or page.request_id != request_id:
        return page
    if result.ok:
        return ResultPage(image=result.image)
    if result.failure_kind is FailureKind.MODEL_REFUSAL:
        message = f"Failed to generate image. Response: {result.message}"
    else:
        message = result.message or "An unexpected error occurred."
    return CreatorPage(clothing=page.clothing, pose=page.pose, error=message)


# Result

def try_again(page: ResultPage) -> CreatorPage:
    """Result -> Creator, dropping the transient result."""
    expect_page(page, ResultPage)
    return CreatorPage()


def outfit_saved(page: ResultPage) -> ResultPage:
    page = expect_page(page, ResultPage)
    return replace(page, saved=True, error=None)
