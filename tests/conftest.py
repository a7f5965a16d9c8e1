"""Shared test fixtures for the rickmorty test suite."""

from __future__ import annotations

import pytest
from fakes import BASE_URL, FakeHttpClient

from rickmorty.api_client import ApiClient


@pytest.fixture()
def fake_http() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture()
def api_client(fake_http: FakeHttpClient) -> ApiClient:
    return ApiClient(fake_http, base_url=BASE_URL)
