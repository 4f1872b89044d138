"""Tests for the REST facade and status view."""

import pytest
from fastapi.testclient import TestClient

from resticstat.api import create_api
from resticstat.config import CacheConfig, Config
from resticstat.core.constants import QueryMode
from resticstat.core.services import create_services
from resticstat.core.status import get_status
from tests.helpers import ExplodingSource, FakeSource, make_profiles


def _services(tmp_path, source, **cfg):
    config = Config(data_root=str(tmp_path), **cfg)
    return create_services(config=config, source=source)


@pytest.fixture
def svc(tmp_path):
    make_profiles(tmp_path, "laptop", "nas")
    return _services(tmp_path, FakeSource(failures={"laptop": {QueryMode.RAW_DATA}}))


@pytest.fixture
def client(svc):
    return TestClient(create_api(svc))


class TestStatsEndpoint:
    def test_lists_successful_profiles(self, client):
        resp = client.get("/stats")
        assert resp.status_code == 200
        body = resp.json()
        assert [p["name"] for p in body] == ["nas"]
        nas = body[0]
        assert nas["restore_human"] == "635.09 GiB"
        assert nas["compression_ratio_human"] == "2.00"
        assert nas["compression_space_saving_human"] == "50.00%"
        assert nas["snapshots"] == 3
        assert {p["path"] for p in nas["paths"]} == {"/etc", "/home"}

    def test_served_from_cache(self, client, svc):
        client.get("/stats")
        calls = svc.source.total_calls
        client.get("/stats")
        assert svc.source.total_calls == calls

    def test_single_profile(self, client):
        resp = client.get("/stats/nas")
        assert resp.status_code == 200
        assert resp.json()["name"] == "nas"

    def test_skipped_profile_is_404(self, client):
        assert client.get("/stats/laptop").status_code == 404

    def test_round_failure_is_500(self, tmp_path):
        svc = _services(tmp_path / "missing", FakeSource())
        resp = TestClient(create_api(svc)).get("/stats")
        assert resp.status_code == 500
        assert "cannot list data root" in resp.json()["detail"]

    def test_all_profiles_failing_is_empty_not_error(self, tmp_path):
        make_profiles(tmp_path, "a")
        resp = TestClient(create_api(_services(tmp_path, ExplodingSource()))).get("/stats")
        assert resp.status_code == 200
        assert resp.json() == []


class TestStatus:
    def test_status_before_any_refresh(self, client, svc):
        body = client.get("/status").json()
        assert body["source"] == "fake"
        assert body["cache"]["populated"] is False
        assert body["cache"]["age_seconds"] is None
        assert body["refresh"]["health"] == "unknown"
        assert svc.source.total_calls == 0

    def test_status_after_refresh(self, client, svc):
        client.get("/stats")
        status = get_status(svc)
        assert status["status"] == "healthy"
        assert status["cache"]["populated"] is True
        assert status["cache"]["profiles"] == 1
        assert status["cache"]["fresh"] is True
        assert status["refresh"]["last_round"]["skipped"] == ["laptop"]
        assert status["config"]["data_root"] == svc.config.data_root


class TestServices:
    def test_refresh_worker_only_when_interval_set(self, tmp_path):
        assert _services(tmp_path, FakeSource()).refresh_worker is None
        svc = _services(tmp_path, FakeSource(), cache=CacheConfig(refresh_interval=30))
        assert svc.refresh_worker is not None
        assert svc.refresh_worker.interval == 30

    def test_reduced_mode_wired(self, tmp_path):
        svc = _services(tmp_path, FakeSource(), reduced_mode=True)
        assert svc.aggregator.reduced_mode is True
        assert svc.cache.ttl_seconds == 3600
