"""
Data Store Snapshot Test Suite.

This module contains tests for saving and loading mined data stores together
with the scope they were mined for.
"""

import pytest

from miners.models import DataStore, Issue, PullRequest, Scope
from storage.data_store_snapshot import DataStoreSnapshot
from github_fixtures import issue_api_url, pull_api_url, utc


@pytest.fixture
def data_store():
    data_store = DataStore()
    for number in (30, 4):
        data_store.add_issue(
            Issue(
                repository_name="org/repo",
                number=number,
                created_at=None,
                closed_at=utc(2022, 2, 10),
                title=f"Issue {number}",
                url=issue_api_url("org/repo", number),
                html_url=f"https://github.com/org/repo/issues/{number}",
                reporter="alice",
                labels=["bug"],
                commit_shas=["abc"],
                pull_request_urls=[pull_api_url("org/repo", 42)],
            )
        )
    data_store.add_pull_request(
        PullRequest(
            repository_name="org/repo",
            number=42,
            closed_at=utc(2022, 2, 12),
            title="PR 42",
            url=pull_api_url("org/repo", 42),
            html_url="https://github.com/org/repo/pull/42",
            submitter="bob",
            commit_shas=["c1", None],
        )
    )
    return data_store


@pytest.fixture
def scope():
    return Scope.from_dates("2022-02-01", "2022-03-01", ["org/repo"], ["bug"])


def test_save_and_load_round_trip(tmp_path, data_store, scope):
    snapshot = DataStoreSnapshot(tmp_path / "nested" / "data_store.json")
    assert not snapshot.exists()

    snapshot.save(data_store, scope)
    document = snapshot.load()
    loaded = document.data_store

    assert snapshot.exists()
    assert loaded == data_store
    assert list(loaded.issues) == ["org/repo#30", "org/repo#4"]
    assert loaded.pull_requests["org/repo#42"].commit_shas == ["c1", None]
    assert loaded.issues["org/repo#30"].closed_at == utc(2022, 2, 10)
    assert loaded.labels == ["bug"]
    assert document.scope == scope


def test_save_replaces_previous_snapshot(tmp_path, data_store, scope):
    snapshot = DataStoreSnapshot(tmp_path / "data_store.json")
    snapshot.save(DataStore(), scope)

    snapshot.save(data_store, scope)

    assert len(snapshot.load().data_store.issues) == 2


def test_load_corrupt_snapshot_raises(tmp_path):
    path = tmp_path / "data_store.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(Exception):
        DataStoreSnapshot(path).load()
    assert path.read_text(encoding="utf-8") == "{not json"


def test_load_missing_snapshot_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        DataStoreSnapshot(tmp_path / "missing.json").load()


def test_load_snapshot_without_scope_raises(tmp_path, data_store):
    path = tmp_path / "data_store.json"
    path.write_text(data_store.model_dump_json(), encoding="utf-8")

    with pytest.raises(Exception):
        DataStoreSnapshot(path).load()
