"""Tests for the pure page transitions."""

import pytest

from fitscan.controller import (
    LOADING_TIPS,
    CreatorPage,
    HomePage,
    InvalidTransition,
    LoadingPage,
    ProfileSetupPage,
    ResultPage,
)
from fitscan.controller import transitions
from fitscan.errors import ValidationError
from fitscan.models import BodyScan, FailureKind, GenerationResult, Pose, Profile


class TestStartup:

    def test_no_profile_goes_to_setup(self):
        page = transitions.initial_page(None)

        assert isinstance(page, ProfileSetupPage)
        assert page.draft == Profile()

    def test_incomplete_profile_goes_to_setup_with_draft(self, ready_profile):
        partial = ready_profile.model_copy(update={"body_scan": BodyScan()})

        page = transitions.initial_page(partial)

        assert isinstance(page, ProfileSetupPage)
        assert page.draft.name == "Alex"
        assert page.draft is not partial

    def test_ready_profile_goes_home(self, ready_profile):
        assert transitions.initial_page(ready_profile) == HomePage()


class TestNavigation:

    def test_open_profile_copies(self, ready_profile):
        page = transitions.open_profile(ready_profile)

        assert page.draft == ready_profile
        assert page.draft is not ready_profile

    def test_open_profile_without_profile(self):
        assert transitions.open_profile(None).draft == Profile()

    def test_with_error_keeps_page(self):
        page = transitions.with_error(CreatorPage(pose=Pose.HANDS_ON_HIPS), "nope")

        assert page == CreatorPage(pose=Pose.HANDS_ON_HIPS, error="nope")

    def test_with_error_on_loading(self, clothing_image):
        with pytest.raises(InvalidTransition):
            transitions.with_error(LoadingPage(request_id=1, clothing=clothing_image), "nope")

    def test_can_show_error(self, clothing_image):
        assert transitions.can_show_error(ProfileSetupPage())
        assert transitions.can_show_error(CreatorPage())
        assert transitions.can_show_error(ResultPage(image="data:,"))
        assert not transitions.can_show_error(HomePage())
        assert not transitions.can_show_error(LoadingPage(request_id=1, clothing=clothing_image))
        assert not transitions.can_show_error(None)

    def test_expect_page(self):
        with pytest.raises(InvalidTransition, match="currently on HomePage"):
            transitions.expect_page(HomePage(), CreatorPage)


class TestProfileSetup:

    def test_update_draft(self):
        page = ProfileSetupPage(error="old")

        page = transitions.update_draft(page, name="Sam", height="6.1")

        assert page.draft.name == "Sam"
        assert page.draft.height == "6.1"
        assert page.error is None

    def test_update_draft_rejects_bad_value(self):
        with pytest.raises(ValidationError) as exc_info:
            transitions.update_draft(ProfileSetupPage(), body_type="Pear")

        assert exc_info.value.message.startswith("Invalid value for")

    def test_scan_completed(self, scan_images):
        scan = BodyScan(**scan_images)

        page = transitions.scan_completed(ProfileSetupPage(), scan)

        assert page.draft.body_scan == scan

    def test_validate_incomplete_draft(self):
        with pytest.raises(ValidationError) as exc_info:
            transitions.validate_draft(Profile(name="Sam"))

        assert "3-angle body scan" in exc_info.value.message
        assert exc_info.value.field == "height"

    def test_validate_ready_draft(self, ready_profile):
        transitions.validate_draft(ready_profile)

    def test_profile_saved_opens_creator(self, ready_profile):
        page = transitions.profile_saved(ProfileSetupPage(draft=ready_profile))

        assert page == CreatorPage()

    def test_profile_saved_from_wrong_page(self):
        with pytest.raises(InvalidTransition):
            transitions.profile_saved(HomePage())


class TestCreator:

    def test_select_clothing_clears_error(self, clothing_image):
        page = transitions.select_clothing(CreatorPage(error="x"), clothing_image)

        assert page.clothing == clothing_image
        assert page.error is None

    def test_select_pose_from_value(self):
        page = transitions.select_pose(CreatorPage(), "Walking Motion")

        assert page.pose is Pose.WALKING_MOTION

    def test_start_generation_without_clothing(self, ready_profile):
        with pytest.raises(ValidationError) as exc_info:
            transitions.start_generation(CreatorPage(), ready_profile, 1)

        assert exc_info.value.field == "clothing_image"

    def test_start_generation_with_incomplete_profile(self, clothing_image):
        page = CreatorPage(clothing=clothing_image)

        with pytest.raises(ValidationError) as exc_info:
            transitions.start_generation(page, Profile(name="Sam"), 1)

        assert exc_info.value.field == "profile"

    def test_start_generation(self, ready_profile, clothing_image):
        page = CreatorPage(clothing=clothing_image, pose=Pose.HANDS_ON_HIPS)

        loading = transitions.start_generation(page, ready_profile, 7)

        assert loading.request_id == 7
        assert loading.clothing == clothing_image
        assert loading.pose is Pose.HANDS_ON_HIPS
        assert loading.tip == LOADING_TIPS[0]


class TestLoading:

    def test_tips_cycle_and_wrap(self, clothing_image):
        page = LoadingPage(request_id=1, clothing=clothing_image)
        seen = [page.tip]
        for _ in range(len(LOADING_TIPS)):
            page = transitions.next_tip(page)
            seen.append(page.tip)

        assert seen[:-1] == list(LOADING_TIPS)
        assert seen[-1] == LOADING_TIPS[0]

    def test_success_shows_result(self, clothing_image):
        page = LoadingPage(request_id=3, clothing=clothing_image)

        result_page = transitions.finish_generation(
            page, 3, GenerationResult.success("data:image/png;base64,QUJD")
        )

        assert result_page == ResultPage(image="data:image/png;base64,QUJD")

    def test_refusal_returns_to_creator(self, clothing_image):
        page = LoadingPage(request_id=3, clothing=clothing_image, pose=Pose.THREE_QUARTER_TURN)
        result = GenerationResult.failed(FailureKind.MODEL_REFUSAL, "I can't do that.")

        creator = transitions.finish_generation(page, 3, result)

        assert isinstance(creator, CreatorPage)
        assert creator.error == "Failed to generate image. Response: I can't do that."
        assert creator.clothing == clothing_image
        assert creator.pose is Pose.THREE_QUARTER_TURN

    def test_service_error_returns_to_creator(self, clothing_image):
        page = LoadingPage(request_id=3, clothing=clothing_image)
        result = GenerationResult.failed(FailureKind.SERVICE_ERROR, "Image service error 500: boom")

        creator = transitions.finish_generation(page, 3, result)

        assert creator.error == "Image service error 500: boom"

    def test_stale_result_is_discarded(self, clothing_image):
        home = HomePage()
        result = GenerationResult.success("data:image/png;base64,QUJD")

        assert transitions.finish_generation(home, 3, result) is home

    def test_result_for_older_request_is_discarded(self, clothing_image):
        page = LoadingPage(request_id=4, clothing=clothing_image)
        result = GenerationResult.success("data:image/png;base64,QUJD")

        assert transitions.finish_generation(page, 3, result) is page


class TestResult:

    def test_try_again_drops_result(self):
        assert transitions.try_again(ResultPage(image="data:,")) == CreatorPage()

    def test_outfit_saved(self):
        page = transitions.outfit_saved(ResultPage(image="data:,", error="x"))

        assert page.saved
        assert page.error is None
