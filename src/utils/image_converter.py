from __future__ import annotations
from pathlib import Path
from typing import Tuple, Union
import base64
import io
import re
from PIL import Image

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def is_data_uri(value: str) -> bool:
    return bool(DATA_URI_PATTERN.match(value))


def parse_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """Split a base64 data URI into its mime type and decoded bytes."""
    match = DATA_URI_PATTERN.match(data_uri)
    if not match:
        raise ValueError("Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")
    try:
        payload = base64.b64decode(match.group("data"), validate=True)
    except ValueError as e:
        raise ValueError(f"Data URI payload is not valid base64: {e}") from e
    return match.group("mime"), payload


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


def to_base64(image_data: Union[str, Path, bytes, Image.Image]) -> str:
    if isinstance(image_data, str) and is_data_uri(image_data):
        # already encoded, just strip the header
        return image_data.split(",", 1)[1]

    if isinstance(image_data, (str, Path)):
        path = Path(image_data)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {image_data}")

        with Image.open(path) as img:
            if img.mode in ('RGBA', 'P'):
                img = img.convert('RGB')

            buffer = io.BytesIO()
            img.save(buffer, format='PNG')
            buffer.seek(0)
            return base64.b64encode(buffer.getvalue()).decode('utf-8')

    elif isinstance(image_data, bytes):
        return base64.b64encode(image_data).decode('utf-8')

    elif isinstance(image_data, Image.Image):
        if image_data.mode in ('RGBA', 'P'):
            image_data = image_data.convert('RGB')

        buffer = io.BytesIO()
        image_data.save(buffer, format='PNG')
        buffer.seek(0)
        return base64.b64encode(buffer.getvalue()).decode('utf-8')

    else:
        raise ValueError(f"Unsupported image data type: {type(image_data)}")


def image_mime_type(image_data: Union[str, Path, bytes, Image.Image]) -> str:
    """Mime type to advertise for an image once it has gone through to_base64."""
    if isinstance(image_data, str) and is_data_uri(image_data):
        return parse_data_uri(image_data)[0]
    return "image/png"
