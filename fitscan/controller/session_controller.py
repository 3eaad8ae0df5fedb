"""Top-level page orchestration: Home, ProfileSetup, Creator, Loading, Result."""

import asyncio
import itertools
import logging
from typing import Callable

from ..capture import CaptureSession
from ..config import AppConfig
from ..errors import CameraPermissionError, StorageError, ValidationError
from ..models import BodyScan, FailureKind, GenerationResult, Pose
from ..pipeline import GenerationPipeline
from ..services.camera import Camera
from ..storage import ProfileStore
from ..utils.image_codec import ImageCodec
from . import transitions
from .pages import LOADING_TIPS, CreatorPage, LoadingPage, Page, ProfileSetupPage, ResultPage

logger = logging.getLogger(__name__)


class SessionController:
    """Applies page transitions and runs their side effects.

    Validation failures and storage failures are surfaced as ``error`` on the
    current page rather than raised. The in-memory profile is only replaced
    after the store has accepted the write.
    """

    def __init__(
        self,
        store: ProfileStore,
        pipeline: GenerationPipeline,
        config: AppConfig | None = None,
        on_page_change: Callable[[Page], None] | None = None,
    ):
        self.store = store
        self.pipeline = pipeline
        self.config = config or pipeline.config
        self.on_page_change = on_page_change
        self.tips = LOADING_TIPS

        self.page: Page | None = None
        self.profile = None
        self.scan_session: CaptureSession | None = None

        self._request_ids = itertools.count(1)
        self._tip_task: asyncio.Task | None = None

    def _set_page(self, page: Page) -> None:
        if not isinstance(page, LoadingPage):
            self._stop_tips()
        self.page = page
        if self.on_page_change is not None:
            self.on_page_change(page)

    def _show_error(self, message: str) -> None:
        if not transitions.can_show_error(self.page):
            logger.warning("Not shown on %s: %s", type(self.page).__name__, message)
            return
        self._set_page(transitions.with_error(self.page, message))

    # Startup and navigation

    def startup(self) -> Page:
        """Load the stored profile and pick the first page."""
        try:
            self.profile = self.store.load()
        except StorageError as e:
            logger.error("Could not load profile: %s", e)
            self.profile = None
            self._set_page(transitions.with_error(transitions.initial_page(None), str(e)))
            return self.page

        self._set_page(transitions.initial_page(self.profile))
        return self.page

    def go_home(self) -> None:
        self._set_page(transitions.go_home())

    def open_profile(self) -> None:
        self._set_page(transitions.open_profile(self.profile))

    def open_creator(self) -> None:
        self._set_page(transitions.open_creator())

    # Profile setup

    def update_draft(self, **fields) -> bool:
        try:
            self._set_page(transitions.update_draft(self.page, **fields))
        except ValidationError as e:
            self._show_error(e.message)
            return False
        return True

    def set_face_image(self, data: bytes, declared_type: str | None) -> bool:
        try:
            image = ImageCodec.from_upload(data, declared_type, field="face_image")
        except ValidationError as e:
            self._show_error(e.message)
            return False
        return self.update_draft(face_image=image)

    async def begin_scan(self, camera: Camera) -> CaptureSession | None:
        """Start a guided body scan whose result fills the draft.

        Returns:
            The live session for the UI to drive, or None if the camera
            could not be acquired.
        """
        transitions.expect_page(self.page, ProfileSetupPage)
        if self.scan_session is not None:
            self.scan_session.abort()

        session = CaptureSession.from_config(
            camera,
            self.config.capture,
            on_complete=self._on_scan_complete,
        )
        self.scan_session = session
        try:
            await session.start()
        except CameraPermissionError as e:
            self.scan_session = None
            self._show_error(str(e))
            return None
        return session

    def _on_scan_complete(self, scan: BodyScan) -> None:
        self.scan_session = None
        if isinstance(self.page, ProfileSetupPage):
            self._set_page(transitions.scan_completed(self.page, scan))
        else:
            logger.warning("Body scan completed after leaving profile setup; ignored")

    def save_profile(self) -> bool:
        """ProfileSetup -> Creator once the draft is complete and stored."""
        page = transitions.expect_page(self.page, ProfileSetupPage)
        draft = page.draft
        try:
            transitions.validate_draft(draft)
            self.store.save(draft)
        except ValidationError as e:
            self._show_error(e.message)
            return False
        except StorageError as e:
            logger.error("Profile save failed: %s", e)
            self._show_error(f"Could not save your profile: {e}")
            return False

        self.profile = draft.model_copy(deep=True)
        self._set_page(transitions.profile_saved(page))
        return True

    def delete_outfit(self, outfit_id: str) -> bool:
        if self.profile is None:
            return False
        updated = self.store.remove_outfit(self.profile, outfit_id)
        try:
            self.store.save(updated)
        except StorageError as e:
            logger.error("Outfit delete failed: %s", e)
            self._show_error(f"Could not delete the outfit: {e}")
            return False

        self.profile = updated
        if isinstance(self.page, ProfileSetupPage):
            self._set_page(transitions.update_draft(self.page, saved_outfits=updated.saved_outfits))
        return True

    # Creator

    def select_clothing(self, data: bytes, declared_type: str | None) -> bool:
        page = transitions.expect_page(self.page, CreatorPage)
        try:
            image = ImageCodec.from_upload(data, declared_type, field="clothing item")
        except ValidationError as e:
            self._show_error(e.message)
            return False
        self._set_page(transitions.select_clothing(page, image))
        return True

    def select_pose(self, pose: Pose) -> None:
        self._set_page(transitions.select_pose(self.page, pose))

    async def generate(self) -> GenerationResult | None:
        """Creator -> Loading -> Result/Creator.

        Returns None when the action was rejected in place. If the user has
        left the Loading page by the time the result arrives, the result is
        returned but not applied.
        """
        page = transitions.expect_page(self.page, CreatorPage)
        request_id = next(self._request_ids)
        try:
            loading = transitions.start_generation(page, self.profile, request_id)
        except ValidationError as e:
            self._show_error(e.message)
            return None

        self._set_page(loading)
        self._start_tips(request_id)

        try:
            result = await self.pipeline.generate(self.profile, loading.clothing, loading.pose)
        except Exception as e:
            logger.exception("Unexpected error during generation")
            result = GenerationResult.failed(
                FailureKind.SERVICE_ERROR, str(e) or "An unexpected error occurred."
            )

        next_page = transitions.finish_generation(self.page, request_id, result)
        if next_page is self.page:
            logger.info("Discarding result of request %d; user has left the loading page", request_id)
        else:
            self._set_page(next_page)
        return result

    # Result

    def try_again(self) -> None:
        self._set_page(transitions.try_again(self.page))

    def save_outfit(self, name: str) -> bool:
        """Keep the current result in the lookbook. Saving twice is a no-op."""
        page = transitions.expect_page(self.page, ResultPage)
        if page.saved:
            return False
        if not name.strip():
            self._show_error("Please give your outfit a name.")
            return False

        outfit = self.store.new_outfit(self.profile, name, page.image)
        updated = self.store.add_outfit(self.profile, outfit)
        try:
            self.store.save(updated)
        except StorageError as e:
            logger.error("Outfit save failed: %s", e)
            self._show_error(f"Could not save the outfit: {e}")
            return False

        self.profile = updated
        self._set_page(transitions.outfit_saved(page))
        return True

    # Loading tips

    def _start_tips(self, request_id: int) -> None:
        self._stop_tips()
        self._tip_task = asyncio.create_task(self._cycle_tips(request_id))

    def _stop_tips(self) -> None:
        task = self._tip_task
        self._tip_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _cycle_tips(self, request_id: int) -> None:
        interval = self.config.loading.tip_interval
        while True:
            await asyncio.sleep(interval)
            page = self.page
            if not isinstance(page, LoadingPage) or page.request_id != request_id:
                return
            self._set_page(transitions.next_tip(page, self.tips))

    async def shutdown(self) -> None:
        self._stop_tips()
        if self.scan_session is not None:
            self.scan_session.close()
            self.scan_session = None
        await self.pipeline.close()
