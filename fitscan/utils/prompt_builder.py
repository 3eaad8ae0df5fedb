"""Builds the text instruction sent alongside the reference images."""

from ..models import Pose, Profile


def describe_measurements(profile: Profile) -> str:
    """Format the user-provided body profile as a bullet list.

    Optional measurements are left out entirely when not provided.
    """
    lines = [
        f"- Height: {profile.height} feet",
        f"- Weight: {profile.weight} kilograms",
    ]
    if profile.body_type:
        lines.append(f"- Body Type: {profile.body_type.value}")
    if profile.chest:
        lines.append(f"- Chest: {profile.chest} inches")
    if profile.waist:
        lines.append(f"- Waist: {profile.waist} inches")
    if profile.hips:
        lines.append(f"- Hips: {profile.hips} inches")
    return "\n".join(lines)


def describe_references(profile: Profile) -> str:
    """Name the attached images in the order they are sent."""
    refs = []
    if profile.face_image is not None:
        refs.append("a close-up face photo")
    refs.append("three body scan photos (front, side, and back views)")
    refs.append("a photo of the clothing item")
    return ", then ".join(refs)


def build_tryon_prompt(profile: Profile, pose: Pose) -> str:
    """Build the try-on instruction for one generation request.

    The instruction asks the service to analyze the reference photos rather
    than copy them, to reconstruct a new image rather than edit an input, to
    fit the garment realistically (flaws included), and to render the
    requested pose against a neutral background.
    """
    name = profile.name.strip()
    pose_name = Pose(pose).value

    prompt = f"""Create a photorealistic virtual try-on image of {name}.

The attached images are, in order: {describe_references(profile)}.

Step 1: Body analysis.
Analyze the reference photos of {name} to understand their body structure: shoulder-to-hip ratio, torso length, limb thickness, posture and overall build. Use the photos only as references for analysis. Do not copy or paste them into the output.
User-provided body profile (treat as ground truth):
{describe_measurements(profile)}

Step 2: Body reconstruction.
Reconstruct a new full-body image of {name} that matches the analysis and the body profile above. Do not edit or retouch any of the input photos, and do not use a generic or idealized body shape.

Step 3: Identity.
Keep {name}'s face, skin tone and hair faithful to the reference photos, with lighting consistent across the whole image.

Step 4: Clothing.
Analyze the clothing item's material, cut and texture from its photo, then show how it would really fit this body: drape, folds, stretch and creases. Do not create an idealized fit. If it would be tight, loose or unflattering somewhere, render it that way.

Final output:
A single photorealistic image of {name} in the "{pose_name}" pose against a clean, neutral light gray studio background."""

    return prompt
