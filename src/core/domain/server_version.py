"""Parseo y clasificación de versiones del servidor.

Por qué funciones puras:
- Sin I/O: el resolver de `adapters.version_resolver` entrega el cuerpo de
  `/version` y el selector solo pregunta `supports_standard_acl_endpoint`.
- La frontera 11.0.1 / 11.0.2 se prueba sin red.
"""

from __future__ import annotations

import re

from core.domain.models import ServerVersion
from core.errors import VersionParseError

_LEADING_INT = re.compile(r"\d+")


def extract_version_token(body: str) -> str:
    """Return the last whitespace-separated token of the body's first line."""

    lines = body.splitlines()
    tokens = lines[0].split() if lines else []
    if not tokens:
        raise VersionParseError(body)
    return tokens[-1]


def parse_version(text: str) -> ServerVersion:
    """Parse `MAJOR.MINOR.PATCH[...]`.

    Trailing non-numeric data in a component is dropped ("0+2015" -> 0) and
    components after the third are ignored. Fewer than three numeric
    components is an error.
    """

    parts = text.strip().split(".")
    if len(parts) < 3:
        raise VersionParseError(text)

    numbers: list[int] = []
    for part in parts[:3]:
        match = _LEADING_INT.match(part)
        if match is None:
            raise VersionParseError(text)
        numbers.append(int(match.group()))

    major, minor, patch = numbers
    return ServerVersion(major=major, minor=minor, patch=patch)


def parse_version_body(body: str) -> ServerVersion:
    return parse_version(extract_version_token(body))


def supports_standard_acl_endpoint(version: ServerVersion) -> bool:
    """True for every version after 11.0.1."""

    major, minor, patch = version.as_tuple()
    if major < 11:
        return False
    if major == 11 and minor == 0 and patch <= 1:
        return False
    return True
