"""
Tests for the colour name service
"""

import json

import pytest
from fastapi.testclient import TestClient

from boundary_scan import name_service
from boundary_scan.infrastructure.clients import CallableClassifier
from tests.conftest import CountingClassifier


def hue_bands(item):
    hue = item[0]
    if hue < 20:
        return "Red"
    if hue < 45:
        return "Orange"
    return "Yellow"


@pytest.fixture
def counting_classifier():
    classifier = CountingClassifier(hue_bands)
    name_service.set_classifier(classifier)
    yield classifier
    name_service._state.update({"classifier": None, "cache": None})


@pytest.fixture
def client(counting_classifier):
    with TestClient(name_service.app) as test_client:
        yield test_client


def ndjson(response):
    return [json.loads(line) for line in response.text.splitlines() if line]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "classifier": "counting-stub",
            "cache_entries": 0,
        }


class TestNames:

    def test_streams_named_colours_in_hue_order(self, client):
        response = client.get("/names", params={"hue_count": 60, "stride": 10})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")
        lines = ndjson(response)
        assert [(line["index"], line["name"]) for line in lines] == [
            (0, "Red"), (20, "Orange"), (45, "Yellow"),
        ]
        assert lines[0]["color"]["hex"] == "#bf4040"

    def test_repeat_scan_served_from_cache(self, client, counting_classifier):
        client.get("/names", params={"hue_count": 60})
        calls = counting_classifier.total_calls

        client.get("/names", params={"hue_count": 60})

        assert counting_classifier.total_calls == calls
        assert client.get("/health").json()["cache_entries"] == calls

    @pytest.mark.parametrize("params", [
        {"saturation": 150},
        {"lightness": -1},
        {"hue_count": 0},
        {"stride": 1},
    ])
    def test_invalid_parameters(self, client, params):
        assert client.get("/names", params=params).status_code == 422

    def test_classifier_failure_reported_in_band(self):
        classifier = CountingClassifier(hue_bands, fail_on={(15, 50.0, 50.0)})
        name_service.set_classifier(classifier)
        try:
            with TestClient(name_service.app) as client:
                lines = ndjson(client.get("/names", params={"hue_count": 60}))
        finally:
            name_service._state.update({"classifier": None, "cache": None})

        assert lines[0]["name"] == "Red"
        assert lines[-1]["error_type"] == "stub"

    def test_plain_function_classifier(self):
        name_service.set_classifier(CallableClassifier(lambda item: "Grey"))
        try:
            with TestClient(name_service.app) as client:
                lines = ndjson(client.get("/names", params={"saturation": 0}))
        finally:
            name_service._state.update({"classifier": None, "cache": None})

        assert [(line["index"], line["name"]) for line in lines] == [(0, "Grey")]
