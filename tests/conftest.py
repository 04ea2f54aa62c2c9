"""Shared fixtures: a client with instant retries and a few prebuilt handles."""

import pytest

from ghandle import GitHubClient, RetryPolicy
from ghandle.account import Organization, User
from ghandle.repository import Repository


@pytest.fixture
def client():
    with GitHubClient(
        token="test-token",
        base_url="https://api.github.com",
        retry_policy=RetryPolicy.immediate(),
    ) as client:
        yield client


@pytest.fixture
def user(client):
    return User(client, "Octocat", 1)


@pytest.fixture
def organization(client):
    return Organization(client, "Acme", 2)


@pytest.fixture
def repository(user):
    return Repository(user, "hello")
