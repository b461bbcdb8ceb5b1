"""Shared fakes for pipeline tests."""

import json

import pytest

from product_enricher.fetcher import FetchResult
from product_enricher.providers.base import BaseCompletionProvider, BaseSearchProvider


class FakeCompletionProvider(BaseCompletionProvider):
    def __init__(self, response="", error=None):
        self.response = json.dumps(response) if isinstance(response, dict) else response
        self.error = error
        self.calls = []

    async def complete(self, system_instructions, prompt):
        self.calls.append((system_instructions, prompt))
        if self.error is not None:
            raise self.error
        return self.response


class FakeSearchProvider(BaseSearchProvider):
    def __init__(self, answer="", error=None):
        self.answer = json.dumps(answer) if isinstance(answer, dict) else answer
        self.error = error
        self.calls = []

    async def search(self, system_instructions, query):
        self.calls.append((system_instructions, query))
        if self.error is not None:
            raise self.error
        return self.answer


class FakeFetcher:
    def __init__(self, result=None):
        self.result = result or FetchResult(success=True, content="[PRICES FOUND ON PAGE: $10.00]")
        self.calls = []

    async def fetch(self, url):
        self.calls.append(url)
        return self.result


@pytest.fixture
def completion_factory():
    return FakeCompletionProvider


@pytest.fixture
def search_factory():
    return FakeSearchProvider


@pytest.fixture
def fetcher_factory():
    return FakeFetcher


@pytest.fixture
def events():
    return []
