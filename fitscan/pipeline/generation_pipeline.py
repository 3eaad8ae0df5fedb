"""Try-on generation: request assembly and response classification."""

import logging
from typing import Any

from ..config import AppConfig
from ..errors import GenerationServiceError, ValidationError
from ..models import (
    DEFAULT_POSE,
    FailureKind,
    GenerationRequest,
    GenerationResult,
    ImageFile,
    Pose,
    Profile,
)
from ..services.gemini_client import GeminiImageClient, image_part, text_part
from ..utils.prompt_builder import build_tryon_prompt

logger = logging.getLogger(__name__)


DEFAULT_REFUSAL_MESSAGE = (
    "No image was generated. The model may have refused the request due to "
    "safety policies. Please try a different set of images."
)


class GenerationPipeline:
    """One request/response cycle with the image-generation service.

    Flow:
    1. Validate inputs (no network on failure)
    2. Assemble parts: face?, front, side, back, clothing, instruction text
    3. Send exactly one request
    4. Classify the response into a GenerationResult

    No retries; retry policy belongs to the caller. The profile is never
    modified.
    """

    def __init__(self, config: AppConfig, client: GeminiImageClient | None = None):
        self.config = config
        self.client = client or GeminiImageClient(
            config=config.gemini,
            api_key=config.gemini_api_key,
        )

    @staticmethod
    def validate(profile: Profile | None, clothing_image: ImageFile | None) -> None:
        """Raise ValidationError unless the inputs can be sent."""
        if clothing_image is None:
            raise ValidationError("Please upload a clothing item.", field="clothing_image")
        if profile is None or not profile.is_generation_ready:
            missing = profile.missing_fields() if profile is not None else ["profile"]
            raise ValidationError(
                "Please complete your name, measurements, and the 3-angle body scan "
                f"(missing: {', '.join(missing)}).",
                field="profile",
            )

    @staticmethod
    def build_parts(request: GenerationRequest) -> list[dict[str, Any]]:
        """Ordered request parts: face?, body scan, clothing, text."""
        profile = request.profile
        parts = []
        if profile.face_image is not None:
            parts.append(image_part(profile.face_image))
        for scan_image in profile.body_scan.images():
            parts.append(image_part(scan_image))
        parts.append(image_part(request.clothing_image))
        parts.append(text_part(build_tryon_prompt(profile, request.pose)))
        return parts

    async def generate(
        self,
        profile: Profile | None,
        clothing_image: ImageFile | None,
        pose: Pose = DEFAULT_POSE,
    ) -> GenerationResult:
        """Generate a try-on image.

        Raises:
            ValidationError: before any network call, if the clothing image
                is missing or the profile is not generation-ready.

        Returns:
            ``success`` with a data URL, or ``failed`` with MODEL_REFUSAL /
            SERVICE_ERROR. Service failures never escape as exceptions.
        """
        self.validate(profile, clothing_image)

        request = GenerationRequest(
            clothing_image=clothing_image,
            profile=profile.model_copy(deep=True),
            pose=Pose(pose),
        )
        parts = self.build_parts(request)
        logger.info(
            "Generating try-on for %s (pose: %s, %d parts)",
            profile.name, request.pose.value, len(parts),
        )

        try:
            response = await self.client.generate_content(parts)
        except GenerationServiceError as e:
            logger.error("Generation failed: %s", e)
            return GenerationResult.failed(FailureKind.SERVICE_ERROR, str(e))

        result = self.interpret_response(response)
        if result.ok:
            logger.info("Generation succeeded")
        else:
            logger.warning("Generation returned no image (%s): %s", result.failure_kind.value, result.message)
        return result

    @staticmethod
    def interpret_response(data: Any) -> GenerationResult:
        """Classify a raw service response.

        Only the first candidate is used. The first part carrying inline
        image data wins; otherwise any returned text explains the refusal.
        """
        if not isinstance(data, dict):
            return GenerationResult.failed(FailureKind.SERVICE_ERROR, "Malformed response from image service")

        candidates = data.get("candidates") or []
        if not isinstance(candidates, list):
            return GenerationResult.failed(FailureKind.SERVICE_ERROR, "Malformed response from image service")

        if not candidates:
            feedback = data.get("promptFeedback") or {}
            reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            message = f"Request blocked: {reason}" if reason else DEFAULT_REFUSAL_MESSAGE
            return GenerationResult.failed(FailureKind.MODEL_REFUSAL, message)

        candidate = candidates[0]
        content = (candidate.get("content") or {}) if isinstance(candidate, dict) else None
        parts = (content.get("parts") or []) if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return GenerationResult.failed(FailureKind.SERVICE_ERROR, "Malformed response from image service")

        texts = []
        for part in parts:
            if not isinstance(part, dict):
                continue
            inline = part.get("inlineData") or part.get("inline_data")
            if isinstance(inline, dict) and inline.get("data"):
                mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                return GenerationResult.success(f"data:{mime_type};base64,{inline['data']}")
            if part.get("text"):
                texts.append(part["text"])

        message = "".join(texts).strip() or DEFAULT_REFUSAL_MESSAGE
        return GenerationResult.failed(FailureKind.MODEL_REFUSAL, message)

    async def close(self):
        await self.client.close()
