"""
Prompt builders for Gemini API requests.

One builder per mode. Each is a pure function of the user's free text;
the wording of the templates is tuned for model stability and should be
changed with care.
"""

from ..config import DEFAULT_REMIX_ACTION


def build_style_remix_prompt(user_text: str = "") -> str:
    """
    Prompt to merge a subject into the scene of a style reference.

    Expects two attachments: the style/background reference first and
    the subject second.

    Args:
        user_text: Action or context for the subject. When blank, a
            candid influencer-style shot is requested instead.

    Returns:
        Prompt string for style remix.
    """
    action = user_text.strip() or DEFAULT_REMIX_ACTION
    return (
        "Generate a hyper-realistic, premium lifestyle photograph merging these two references.\n"
        "\n"
        "REFERENCE 1 (Background/Style): Use this image's environment, lighting, and color palette.\n"
        "REFERENCE 2 (Subject): Use this person, preserving their exact clothing and identity.\n"
        "\n"
        f"ACTION/CONTEXT: {action}\n"
        "\n"
        "REQUIREMENTS:\n"
        "1. Photorealism: Must look like a real photo (depth of field, texture, natural lighting).\n"
        "2. Clothing Fidelity: Keep the subject's outfit from Reference 2 EXACT, including any text or logos.\n"
        "3. Atmosphere: Premium, \"quiet luxury\" or high-end streetwear aesthetic.\n"
        "4. Composition: The subject should be naturally integrated into the background from Reference 1."
    )


def build_face_swap_prompt(user_note: str = "") -> str:
    """
    Prompt to put the reference face onto the target image.

    Expects the target (body) image first and the face reference second.

    Args:
        user_note: Optional extra instruction, appended as a note line.

    Returns:
        Prompt string for face swap.
    """
    prompt = (
        "Edit the first image (Target Image) by replacing the main subject's face with the face "
        "from the second image (Face Reference).\n"
        "\n"
        "INSTRUCTIONS:\n"
        "- Swap the face seamlessly.\n"
        "- Maintain the lighting, skin tone match, grain, and angle of the Target Image.\n"
        "- Preserve the facial identity (eyes, nose, mouth structure) of the Face Reference.\n"
        "- Ensure the expression matches the context of the target image unless specified otherwise."
    )
    note = user_note.strip()
    if note:
        prompt += f"\n- User Note: {note}"
    return prompt


def build_edit_prompt(user_text: str) -> str:
    """Prompt to apply a free-form edit to a single attached image."""
    return f"Edit this image: {user_text}"


def build_generate_prompt(user_text: str) -> str:
    # Text-to-image sends the user's words untouched.
    return user_text
