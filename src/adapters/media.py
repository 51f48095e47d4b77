"""Decodificación de ficheros recibidos como base64 (opcionalmente data URL)."""

from __future__ import annotations

import base64
import binascii
import re

from core.domain.errors import InvalidParams

_DATA_URL_PREFIX_RE = re.compile(r"^data:([\w.+/-]+);base64,")


def strip_data_url_prefix(file_data: str) -> str:
    return _DATA_URL_PREFIX_RE.sub("", file_data, count=1)


def decode_file_data(file_data: str) -> bytes:
    """`data:image/jpeg;base64,AAAA` o `AAAA` -> bytes."""

    payload = "".join(strip_data_url_prefix(file_data).split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidParams(f"fileData is not valid base64: {exc}") from exc
