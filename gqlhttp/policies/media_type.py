from python_multipart.multipart import parse_options_header
from gqlhttp.interfaces.schemas import ParsedMediaType


def _text(value: bytes | str) -> str:
    return value.decode("latin-1") if isinstance(value, bytes) else value


def parse_media_type(header: str) -> ParsedMediaType:
    content_type, params = parse_options_header(header)
    return ParsedMediaType(
        type=_text(content_type).strip().lower(),
        parameters={
            _text(name).lower(): _text(value) for name, value in params.items()
        },
    )
