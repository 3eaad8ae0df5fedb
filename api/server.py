"""FastAPI server for FitScan.

Exposes the core to a presentation layer:
- profile: read and save the stored profile
- tryon: generate a try-on image from the stored profile + a garment photo
- outfits: keep or delete generated looks
"""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from fitscan import __version__
from fitscan.config import load_config
from fitscan.errors import StorageError, ValidationError
from fitscan.models import DEFAULT_POSE, FailureKind, Pose, Profile
from fitscan.pipeline import GenerationPipeline
from fitscan.storage import ProfileStore
from fitscan.utils.image_codec import ImageCodec
from fitscan.utils.logger import setup_logging

logger = logging.getLogger(__name__)


app = FastAPI(
    title="FitScan API",
    description="Body scan profiles and AI virtual try-on",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TryOnRequest(BaseModel):
    """Request body for try-on generation."""
    clothing_photo: str  # Base64 data URL
    pose: Pose = DEFAULT_POSE


class TryOnResponse(BaseModel):
    """Response with generated image."""
    success: bool
    image: str | None = None  # data URL
    error: str | None = None
    failure_kind: str | None = None


class SaveOutfitRequest(BaseModel):
    name: str
    image: str  # data URL of a generated result


# Initialized on first request
_pipeline: GenerationPipeline | None = None
_store: ProfileStore | None = None


def get_pipeline() -> GenerationPipeline:
    """Get or create the pipeline instance."""
    global _pipeline
    if _pipeline is None:
        config = load_config()
        setup_logging(config.log_level)
        _pipeline = GenerationPipeline(config)
    return _pipeline


def get_store() -> ProfileStore:
    """Get or create the profile store."""
    global _store
    if _store is None:
        _store = ProfileStore.from_config(load_config().storage)
    return _store


def _load_profile() -> Profile:
    try:
        profile = get_store().load()
    except StorageError as e:
        raise HTTPException(status_code=507, detail=str(e))
    if profile is None:
        raise HTTPException(status_code=404, detail="No profile has been saved yet")
    return profile


def _save_profile(profile: Profile) -> None:
    try:
        get_store().save(profile)
    except StorageError as e:
        raise HTTPException(status_code=507, detail=str(e))


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "FitScan API", "version": __version__}


@app.get("/health")
async def health():
    """Detailed health check."""
    try:
        profile = get_store().load()
    except StorageError:
        return {"status": "degraded", "storage": "unreadable"}
    return {
        "status": "ok",
        "storage": "ok",
        "profile": "ready" if profile and profile.is_generation_ready else "incomplete",
    }


@app.get("/api/profile")
async def read_profile():
    return _load_profile().model_dump(mode="json", by_alias=True)


@app.put("/api/profile")
async def save_profile(profile: Profile):
    """Save the profile; it must be generation-ready."""
    if not profile.is_generation_ready:
        raise HTTPException(
            status_code=422,
            detail=f"Profile is incomplete: missing {', '.join(profile.missing_fields())}",
        )
    _save_profile(profile)
    return {"saved": True}


@app.post("/api/tryon", response_model=TryOnResponse)
async def generate_tryon(request: TryOnRequest):
    """Generate a virtual try-on image for the stored profile.

    Returns:
        The generated image as a data URL, or the failure reason
    """
    profile = _load_profile()
    try:
        clothing = ImageCodec.from_data_url(request.clothing_photo, field="clothing_photo")
        result = await get_pipeline().generate(profile, clothing, request.pose)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except Exception as e:
        logger.exception("Try-on generation failed")
        return TryOnResponse(
            success=False,
            error=str(e),
            failure_kind=FailureKind.SERVICE_ERROR.value,
        )

    if result.ok:
        return TryOnResponse(success=True, image=result.image)
    return TryOnResponse(
        success=False,
        error=result.message,
        failure_kind=result.failure_kind.value,
    )


@app.post("/api/outfits")
async def save_outfit(request: SaveOutfitRequest):
    if not request.name.strip():
        raise HTTPException(status_code=422, detail="Please give your outfit a name.")
    profile = _load_profile()
    outfit = ProfileStore.new_outfit(profile, request.name, request.image)
    _save_profile(ProfileStore.add_outfit(profile, outfit))
    return outfit.model_dump()


@app.delete("/api/outfits/{outfit_id}")
async def delete_outfit(outfit_id: str):
    profile = _load_profile()
    if not any(o.id == outfit_id for o in profile.saved_outfits):
        raise HTTPException(status_code=404, detail=f"Outfit {outfit_id} not found")
    _save_profile(ProfileStore.remove_outfit(profile, outfit_id))
    return {"deleted": outfit_id}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
