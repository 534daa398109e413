"""Tests for the reconcile-and-upload driver."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ghdownloads.platforms.github import DeleteError, ListingError, RemoteDownload, UploadError
from ghdownloads.services.upload_service import DownloadUploadService, describe_size, target_name


def _write(path: Path, size: int) -> Path:
    path.write_bytes(b"x" * size)
    return path


@pytest.mark.parametrize(
    ("file_name", "suffix", "expected"),
    [
        ("app.tar.gz", "-v2", "app.tar-v2.gz"),
        ("app.zip", "-1.0", "app-1.0.zip"),
        ("README", "-final", "README-final"),
        (".profile", "-x", "-x.profile"),
        ("app.zip", None, "app.zip"),
        ("app.zip", "", "app.zip"),
    ],
)
def test_target_name(file_name: str, suffix: str | None, expected: str) -> None:
    assert target_name(file_name, suffix) == expected


def test_describe_size_singular_only_for_one_byte() -> None:
    assert describe_size(1) == "1 byte"
    assert describe_size(0) == "0 bytes"
    assert describe_size(2) == "2 bytes"


def test_overwrite_deletes_matching_download_then_uploads(tmp_path, make_client, repository) -> None:
    artifact = _write(tmp_path / "app.zip", 3)
    client = make_client([RemoteDownload(name="app.zip", id=17)])
    existing = {"app.zip": 17}

    report = DownloadUploadService(client).run(
        [artifact], repository, overwrite=True, existing=existing
    )

    assert client.calls == [("delete", 17), ("create", "app.zip")]
    assert "app.zip" not in existing
    assert [download.id for download in report.deleted] == [17]
    assert report.uploaded_names == ["app.zip"]


def test_overwrite_lists_existing_downloads_once(tmp_path, make_client, repository) -> None:
    first = _write(tmp_path / "a.bin", 1)
    second = _write(tmp_path / "b.bin", 1)
    client = make_client([RemoteDownload(name="b.bin", id=5), RemoteDownload(name="other", id=6)])

    DownloadUploadService(client).run([first, second], repository, overwrite=True)

    assert client.calls == [
        ("list", "octo/widgets"),
        ("create", "a.bin"),
        ("delete", 5),
        ("create", "b.bin"),
    ]


def test_without_overwrite_nothing_is_listed_or_deleted(tmp_path, make_client, repository) -> None:
    artifact = _write(tmp_path / "app.zip", 4)
    client = make_client([RemoteDownload(name="app.zip", id=17)])

    DownloadUploadService(client).run([artifact], repository, overwrite=False)

    assert client.count("list") == 0
    assert client.count("delete") == 0
    assert client.calls == [("create", "app.zip")]


def test_dry_run_lists_and_logs_but_does_not_mutate(
    tmp_path, make_client, repository, caplog
) -> None:
    artifact = _write(tmp_path / "app.zip", 10)
    client = make_client([RemoteDownload(name="app.zip", id=17)])

    with caplog.at_level(logging.INFO):
        report = DownloadUploadService(client).run(
            [artifact], repository, overwrite=True, dry_run=True
        )

    assert client.calls == [("list", "octo/widgets")]
    assert "Deleting existing download: app.zip (id=17)" in caplog.messages
    assert "Adding download: app.zip (10 bytes)" in caplog.messages
    assert report.dry_run
    assert report.uploaded_names == ["app.zip"]


def test_colliding_target_names_delete_only_once(tmp_path, make_client, repository) -> None:
    (tmp_path / "one").mkdir()
    (tmp_path / "two").mkdir()
    first = _write(tmp_path / "one" / "dup.bin", 2)
    second = _write(tmp_path / "two" / "dup.bin", 2)
    client = make_client([RemoteDownload(name="dup.bin", id=9)])

    DownloadUploadService(client).run([first, second], repository, overwrite=True)

    assert client.count("delete") == 1
    assert client.calls[1:] == [("delete", 9), ("create", "dup.bin"), ("create", "dup.bin")]


def test_suffix_applies_before_matching(tmp_path, make_client, repository) -> None:
    artifact = _write(tmp_path / "app.tar.gz", 2)
    client = make_client()
    existing = {"app.tar-v2.gz": 3, "app.tar.gz": 4}

    DownloadUploadService(client).run(
        [artifact], repository, overwrite=True, suffix="-v2", existing=existing
    )

    assert client.calls == [("delete", 3), ("create", "app.tar-v2.gz")]
    assert existing == {"app.tar.gz": 4}


def test_description_and_size_are_sent(tmp_path, make_client, repository) -> None:
    artifact = _write(tmp_path / "notes.txt", 1)
    client = make_client()

    DownloadUploadService(client).run([artifact], repository, description="Release notes")

    created = client.created[0]
    assert created.size == 1
    assert created.description == "Release notes"
    assert created.content_type == "text/plain"
    assert created.as_payload()["description"] == "Release notes"


def test_empty_description_is_omitted(tmp_path, make_client, repository) -> None:
    artifact = _write(tmp_path / "app.zip", 1)
    client = make_client()

    DownloadUploadService(client).run([artifact], repository, description="")

    assert "description" not in client.created[0].as_payload()


def test_one_byte_file_logs_singular(tmp_path, make_client, repository, caplog) -> None:
    artifact = _write(tmp_path / "tiny.bin", 1)
    empty = _write(tmp_path / "empty.bin", 0)

    with caplog.at_level(logging.INFO):
        DownloadUploadService(make_client()).run([artifact, empty], repository)

    assert "Adding download: tiny.bin (1 byte)" in caplog.messages
    assert "Adding download: empty.bin (0 bytes)" in caplog.messages


def test_listing_failure_aborts_before_any_file(tmp_path, make_client, repository) -> None:
    artifact = _write(tmp_path / "app.zip", 1)
    client = make_client(fail_list=True)

    with pytest.raises(ListingError, match="octo/widgets"):
        DownloadUploadService(client).run([artifact], repository, overwrite=True)

    assert client.calls == [("list", "octo/widgets")]


def test_delete_failure_stops_the_run(tmp_path, make_client, repository) -> None:
    first = _write(tmp_path / "a.bin", 1)
    second = _write(tmp_path / "b.bin", 1)
    third = _write(tmp_path / "c.bin", 1)
    client = make_client(
        [RemoteDownload(name="b.bin", id=2), RemoteDownload(name="c.bin", id=3)],
        fail_delete=[2],
    )

    with pytest.raises(DeleteError) as excinfo:
        DownloadUploadService(client).run([first, second, third], repository, overwrite=True)

    assert "Deleting existing download b.bin failed: Not Found (404)" in str(excinfo.value)
    assert excinfo.value.name == "b.bin"
    assert client.calls[1:] == [("create", "a.bin"), ("delete", 2)]


def test_upload_failure_keeps_earlier_uploads(tmp_path, make_client, repository) -> None:
    first = _write(tmp_path / "a.bin", 1)
    second = _write(tmp_path / "b.bin", 1)
    third = _write(tmp_path / "c.bin", 1)
    client = make_client(fail_create=["b.bin"])

    with pytest.raises(UploadError, match="Resource b.bin upload failed: Validation Failed"):
        DownloadUploadService(client).run([first, second, third], repository)

    assert [artifact.name for artifact in client.created] == ["a.bin"]
    assert ("create", "c.bin") not in client.calls


def test_missing_file_is_an_upload_error(tmp_path, make_client, repository) -> None:
    client = make_client()

    with pytest.raises(UploadError, match="Resource ghost.zip upload failed"):
        DownloadUploadService(client).run([tmp_path / "ghost.zip"], repository)

    assert client.calls == []


def test_known_downloads_are_ignored_without_overwrite(tmp_path, make_client, repository) -> None:
    artifact = _write(tmp_path / "app.zip", 1)
    client = make_client()

    report = DownloadUploadService(client).run(
        [artifact], repository, overwrite=False, existing={"app.zip": 17}
    )

    assert client.calls == [("create", "app.zip")]
    assert report.deleted == []
