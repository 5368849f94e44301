import base64
import binascii
import re

DATA_URI_PATTERN = re.compile(r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+)(;[^,]*)?;base64,")


def decode_payload(payload: bytes | str, content_type: str | None, default_type: str) -> tuple[bytes, str]:
    """Return (raw bytes, media type) for an upload given as bytes or base64 text.

    Base64 text may carry a data URI prefix such as "data:image/png;base64,";
    the prefix is stripped and its media type used when content_type is not given.
    Raises ValueError when the text is not valid base64.
    """
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload), content_type or default_type

    media_type = None
    match = DATA_URI_PATTERN.match(payload)
    if match:
        media_type = match.group("media_type")
        payload = payload[match.end():]

    try:
        raw = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Payload is not valid base64") from e

    return raw, content_type or media_type or default_type
