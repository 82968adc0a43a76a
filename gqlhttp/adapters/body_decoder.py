from __future__ import annotations
import codecs
import zlib
from logging import getLogger
from typing import AsyncIterable, Mapping
from starlette.datastructures import Headers
from starlette.requests import ClientDisconnect
from gqlhttp.config.general import general
from gqlhttp.interfaces.errors import CharsetError, PayloadError, UnsupportedMediaError
from gqlhttp.interfaces.schemas import DecodedBody, ParsedMediaType


logger = getLogger(__name__)

BOM = "\ufeff"


def resolve_charset(media_type: ParsedMediaType) -> str:
    charset = media_type.parameters.get("charset", general.DEFAULT_CHARSET).lower()
    # JSON text exchanged between systems must be encoded with a Unicode
    # transformation format (RFC 7159 section 8.1)
    if not charset.startswith("utf-"):
        raise UnsupportedMediaError(f'Unsupported charset "{charset.upper()}".')
    return charset


def resolve_encoding(headers: Headers) -> str:
    encoding = headers.get("content-encoding")
    return "identity" if encoding is None else encoding.lower()


def decompressor(encoding: str):
    if encoding == "identity":
        return None
    if encoding == "deflate":
        return zlib.decompressobj()
    if encoding == "gzip":
        return zlib.decompressobj(wbits=zlib.MAX_WBITS | 16)
    raise UnsupportedMediaError(f'Unsupported content-encoding "{encoding}".')


class LimitedBuffer:
    """Collects body bytes, failing as soon as the limit is crossed."""

    def __init__(self, limit: int, decompress=None) -> None:
        self.limit = limit
        self.received = 0
        self.chunks: list[bytes] = []
        self._decompress = decompress

    def _append(self, data: bytes) -> None:
        self.received += len(data)
        if self.received > self.limit:
            raise PayloadError("Invalid body: request entity too large.")
        self.chunks.append(data)

    def feed(self, data: bytes) -> None:
        if self._decompress is None:
            self._append(data)
            return
        try:
            while data:
                # Never inflate more than one byte past what the limit allows
                self._append(
                    self._decompress.decompress(data, self.limit - self.received + 1)
                )
                data = self._decompress.unconsumed_tail
        except zlib.error as error:
            raise PayloadError(f"Invalid body: {error}.") from error

    def close(self) -> bytes:
        if self._decompress is not None:
            try:
                self._append(self._decompress.flush())
            except zlib.error as error:
                raise PayloadError(f"Invalid body: {error}.") from error
            if not self._decompress.eof:
                raise PayloadError("Invalid body: unexpected end of file.")
        return b"".join(self.chunks)


def _content_length(headers: Headers) -> int | None:
    length = headers.get("content-length")
    if length is None:
        return None
    try:
        return int(length)
    except ValueError as error:
        raise PayloadError("Invalid body: invalid content length.") from error


def _decode_text(raw: bytes, charset: str) -> str:
    try:
        codecs.lookup(charset)
    except LookupError as error:
        raise CharsetError(f'Unsupported charset "{charset.upper()}".') from error
    try:
        text = raw.decode(charset)
    except UnicodeDecodeError as error:
        raise CharsetError(
            f"Invalid body: content is not valid {charset.upper()} ({error.reason})."
        ) from error
    return text[1:] if text.startswith(BOM) else text


async def decode_body(
    stream: AsyncIterable[bytes],
    headers: Mapping[str, str],
    media_type: ParsedMediaType,
    limit: int | None = None,
) -> DecodedBody:
    if not isinstance(headers, Headers):
        headers = Headers(headers=dict(headers))
    limit = general.MAX_BODY_SIZE if limit is None else limit
    charset = resolve_charset(media_type)
    encoding = resolve_encoding(headers)
    buffer = LimitedBuffer(limit, decompressor(encoding))

    # A declared length is only meaningful before any decompression
    length = _content_length(headers) if encoding == "identity" else None
    if length is not None and length > limit:
        raise PayloadError("Invalid body: request entity too large.")

    try:
        async for chunk in stream:
            if chunk:
                buffer.feed(chunk)
    except ClientDisconnect as error:
        raise PayloadError("Invalid body: request aborted.") from error
    raw = buffer.close()

    if length is not None and length != len(raw):
        raise PayloadError(
            "Invalid body: request size did not match content length."
        )
    logger.debug("decoded %s body bytes as %s", len(raw), charset)
    return DecodedBody(text=_decode_text(raw, charset), charset=charset)
