"""Image upload encoding for image blocks"""

import base64


MAX_IMAGE_BYTES = 5 * 1024 * 1024


class ImageRejected(ValueError):
    """An upload that cannot become an image block; the message is shown to the user."""


def encode_image(data: bytes, mime_type: str, max_bytes: int = MAX_IMAGE_BYTES) -> str:
    """Return a data: URI for an uploaded image, or raise ImageRejected."""
    if not mime_type or not mime_type.lower().startswith("image/"):
        raise ImageRejected("Please select an image file")
    if len(data) > max_bytes:
        raise ImageRejected(f"Image size should be less than {max_bytes // (1024 * 1024) or 1}MB")
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type.lower()};base64,{payload}"
