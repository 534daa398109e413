"""Tests for indexing existing downloads."""

from __future__ import annotations

import logging

import pytest

from ghdownloads.platforms.github import GitHubClient, ListingError, RemoteDownload, list_existing_downloads


def test_index_maps_names_to_ids_and_skips_blank_names(make_client, repository) -> None:
    client = make_client(
        [
            RemoteDownload(name="app.zip", id=1),
            RemoteDownload(name="", id=2),
            RemoteDownload(name="notes.txt", id=3),
        ]
    )

    assert list_existing_downloads(client, repository) == {"app.zip": 1, "notes.txt": 3}
    assert client.count("list") == 1


@pytest.mark.parametrize(
    ("downloads", "message"),
    [
        ([], "Listed 0 existing downloads"),
        ([RemoteDownload(name="a", id=1)], "Listed 1 existing download"),
        ([RemoteDownload(name="a", id=1), RemoteDownload(name="b", id=2)], "Listed 2 existing downloads"),
    ],
)
def test_count_is_logged_with_plural(make_client, repository, caplog, downloads, message) -> None:
    with caplog.at_level(logging.DEBUG):
        list_existing_downloads(make_client(downloads), repository)

    assert message in caplog.messages


def test_failure_names_repository_and_cause(make_client, repository) -> None:
    with pytest.raises(ListingError) as excinfo:
        list_existing_downloads(make_client(fail_list=True), repository)

    message = str(excinfo.value)
    assert "octo/widgets" in message
    assert "Server Error (500)" in message
    assert excinfo.value.repository == "octo/widgets"
    assert excinfo.value.__cause__ is not None


def test_malformed_entry_is_a_listing_error(listing_session, repository) -> None:
    client = GitHubClient(session=listing_session([{"name": "app.zip", "id": "abc"}]))

    with pytest.raises(ListingError) as excinfo:
        list_existing_downloads(client, repository)

    assert "Listing downloads for octo/widgets failed: Unexpected download payload" in str(excinfo.value)
    assert excinfo.value.repository == "octo/widgets"
