from __future__ import annotations

import base64


def image_to_base64(data: bytes, mime: str = "image/png") -> str:
    """Encode raw image bytes as a data URI accepted by ``setImage``."""
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"
