from __future__ import annotations

import datetime as dt
from pathlib import Path

import orjson
import pytest

from conftest import make_index, make_record
from tenebra.errors import ManifestError
from tenebra.index.manifest import (
    decode_manifest,
    encode_manifest,
    newest_update,
    parse_timestamp,
    write_manifest,
)


def _with_ts(ts: str) -> bytes:
    return make_index([dict(make_record("Acme", "https://chaos.example/acme.zip"), last_updated=ts)])


def test_decode_maps_remote_keys():
    raw = make_index([make_record("Acme", "https://chaos.example/acme.zip")])
    [e] = decode_manifest(raw)

    assert e.name == "Acme"
    assert e.url == "https://chaos.example/acme.zip"
    assert e.bounty is True
    assert e.last_updated == "2024-01-02T03:04:05.123456Z"
    assert e.updated_at == dt.datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=dt.timezone.utc)


def test_encode_keeps_remote_schema():
    entries = decode_manifest(make_index([make_record("Acme", "https://chaos.example/acme.zip")]))
    obj = orjson.loads(encode_manifest(entries))

    assert list(obj[0].keys()) == [
        "name", "program_url", "URL", "count", "change",
        "is_new", "platform", "bounty", "last_updated",
    ]
    # re-encoding is stable, which the change detection relies on
    assert encode_manifest(decode_manifest(encode_manifest(entries))) == encode_manifest(entries)


@pytest.mark.parametrize(
    "ts, micro",
    [
        ("2024-11-05T03:12:18.473637207Z", 473637),  # 9 digits
        ("2024-11-05T03:12:18.4736372Z", 473637),    # 7 digits, trailing zeros dropped
        ("2024-11-05T03:12:18.47Z", 470000),         # 2 digits
        ("2024-11-05T03:12:18Z", 0),
    ],
)
def test_go_timestamps_survive_reencoding(ts: str, micro: int):
    [e] = decode_manifest(_with_ts(ts))

    assert e.last_updated == ts
    assert orjson.loads(encode_manifest([e]))[0]["last_updated"] == ts
    assert e.updated_at == dt.datetime(2024, 11, 5, 3, 12, 18, micro, tzinfo=dt.timezone.utc)


def test_sub_microsecond_difference_changes_encoding():
    a = decode_manifest(_with_ts("2024-11-05T03:12:18.473637207Z"))
    b = decode_manifest(_with_ts("2024-11-05T03:12:18.473637999Z"))
    assert encode_manifest(a) != encode_manifest(b)


def test_parse_timestamp_numeric_offset():
    got = parse_timestamp("2024-11-05T03:12:18.5-05:30")
    assert got.utcoffset() == -dt.timedelta(hours=5, minutes=30)
    assert got.microsecond == 500000


def test_write_manifest_and_newest_update(tmp_path: Path):
    p = tmp_path / "sub" / "input.json"
    entries = decode_manifest(make_index([
        dict(make_record("A", "https://chaos.example/a.zip"), last_updated="2024-01-01T00:00:00Z"),
        dict(make_record("B", "https://chaos.example/b.zip"), last_updated="2024-03-01T00:00:00.25Z"),
    ]))
    write_manifest(p, entries)

    assert decode_manifest(p.read_bytes()) == entries
    assert newest_update(entries) == dt.datetime(2024, 3, 1, 0, 0, 0, 250000, tzinfo=dt.timezone.utc)
    assert newest_update([]) is None


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        b'{"name": "x"}',
        orjson.dumps([{"name": "x"}]),
        _with_ts("yesterday"),
        _with_ts("2024-11-05T03:12:18.1234567890Z"),
        _with_ts("2024-11-05T03:12:18"),
        _with_ts("2024-13-05T03:12:18Z"),
        orjson.dumps([dict(make_record("A", "u"), last_updated=1700000000)]),
    ],
)
def test_decode_rejects_bad_input(raw: bytes):
    with pytest.raises(ManifestError):
        decode_manifest(raw)
