from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import orjson

from tenebra.errors import ManifestError


@dataclass(frozen=True)
class ManifestEntry:
    name: str
    program_url: str
    url: str
    count: int
    change: int
    is_new: bool
    platform: str
    bounty: bool
    # RFC 3339 wire string, kept verbatim so re-encoding never loses precision
    last_updated: str

    @property
    def updated_at(self) -> dt.datetime:
        return parse_timestamp(self.last_updated)

    def to_json_obj(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "program_url": self.program_url,
            "URL": self.url,
            "count": self.count,
            "change": self.change,
            "is_new": self.is_new,
            "platform": self.platform,
            "bounty": self.bounty,
            "last_updated": self.last_updated,
        }


# Go's RFC3339Nano: 0-9 fractional digits, trailing zeros dropped
_TIMESTAMP_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d{1,9}))?(Z|[+-]\d{2}:\d{2})$"
)


def parse_timestamp(v: Any) -> dt.datetime:
    """
    RFC 3339 string -> aware datetime. Digits past microseconds are dropped
    here only; the entry keeps the full wire string.
    """
    if not isinstance(v, str):
        raise ManifestError(f"last_updated must be an RFC 3339 string, got {v!r}")
    m = _TIMESTAMP_RE.match(v.strip())
    if not m:
        raise ManifestError(f"bad last_updated timestamp {v!r}")
    base, frac, zone = m.groups()
    try:
        ts = dt.datetime.strptime(base, "%Y-%m-%dT%H:%M:%S")
    except ValueError as e:
        raise ManifestError(f"bad last_updated timestamp {v!r}") from e

    micro = int((frac or "").ljust(6, "0")[:6])
    if zone == "Z":
        tz = dt.timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        tz = dt.timezone(sign * dt.timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    return ts.replace(microsecond=micro, tzinfo=tz)


def entry_from_obj(obj: Any) -> ManifestEntry:
    if not isinstance(obj, dict):
        raise ManifestError(f"manifest record must be an object, got {type(obj).__name__}")
    try:
        last_updated = obj["last_updated"]
        parse_timestamp(last_updated)
        return ManifestEntry(
            name=str(obj["name"]),
            program_url=str(obj["program_url"]),
            url=str(obj["URL"]),
            count=int(obj["count"]),
            change=int(obj["change"]),
            is_new=bool(obj["is_new"]),
            platform=str(obj["platform"]),
            bounty=bool(obj["bounty"]),
            last_updated=last_updated,
        )
    except KeyError as e:
        raise ManifestError(f"manifest record missing key {e.args[0]!r}") from e
    except (TypeError, ValueError) as e:
        raise ManifestError(f"bad manifest record: {e}") from e


def decode_manifest(data: bytes) -> list[ManifestEntry]:
    try:
        obj = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise ManifestError(f"manifest is not valid JSON: {e}") from e
    if not isinstance(obj, list):
        raise ManifestError("manifest root must be a JSON array")
    return [entry_from_obj(o) for o in obj]


def encode_manifest(entries: list[ManifestEntry]) -> bytes:
    return orjson.dumps([e.to_json_obj() for e in entries])


def newest_update(entries: list[ManifestEntry]) -> dt.datetime | None:
    if not entries:
        return None
    return max(e.updated_at for e in entries)


def write_manifest(path: Path, entries: list[ManifestEntry]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_manifest(entries))
