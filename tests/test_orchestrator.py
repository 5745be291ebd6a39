from __future__ import annotations

from pathlib import Path

import pytest

from conftest import FakeResp, make_index, make_record, make_zip
from tenebra.fetch.fetcher import Fetcher
from tenebra.index.manifest import decode_manifest
from tenebra.pipeline.orchestrator import run_fetches


def _entries(names: list[str]):
    return decode_manifest(make_index([make_record(n, f"https://chaos.example/{n}.zip") for n in names]))


@pytest.mark.parametrize("max_workers", [0, 1, 3])
def test_one_failure_does_not_abort_siblings(tmp_path: Path, fake_web, max_workers: int):
    names = ["alpha", "bravo", "charlie", "delta", "echo"]
    for n in names:
        if n == "charlie":
            continue  # 404
        fake_web.routes[f"https://chaos.example/{n}.zip"] = FakeResp(
            make_zip({f"{n}/{n}.txt": f"http://{n}.com\n".encode()})
        )

    report = run_fetches(_entries(names), tmp_path, Fetcher("ua"), max_workers=max_workers)

    assert sorted(report.failed) == ["https://chaos.example/charlie.zip"]
    assert "404" in report.failed["https://chaos.example/charlie.zip"]
    assert sorted(report.succeeded) == [f"https://chaos.example/{n}.zip" for n in names if n != "charlie"]
    assert report.total == 5

    trees = sorted(p.name for p in tmp_path.iterdir() if p.is_dir())
    assert trees == ["alpha", "bravo", "delta", "echo"]
    assert len(fake_web.calls) == 5


def test_empty_entry_list(tmp_path: Path):
    report = run_fetches([], tmp_path, Fetcher("ua"))
    assert report.total == 0


def test_extraction_failure_is_contained(tmp_path: Path, fake_web):
    fake_web.routes["https://chaos.example/good.zip"] = FakeResp(make_zip({"good.txt": b"http://good.com\n"}))
    fake_web.routes["https://chaos.example/evil.zip"] = FakeResp(make_zip({"../evil.txt": b"x\n"}))

    report = run_fetches(_entries(["good", "evil"]), tmp_path / "out", Fetcher("ua"), max_workers=2)

    assert report.succeeded == ["https://chaos.example/good.zip"]
    assert list(report.failed) == ["https://chaos.example/evil.zip"]
    assert (tmp_path / "out" / "good.txt").exists()
    assert not (tmp_path / "evil.txt").exists()
