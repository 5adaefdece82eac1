"""Shared fixtures: sessions wired to fake boto3 clients."""

from __future__ import annotations

import pytest

from awsh.lib.clients import ClientFactory
from awsh.lib.config_parser import ShellConfig
from awsh.shell.interpreter import ShellInterpreter, ShellSession


class FakeClient:
    """Stands in for a boto3 client, returning canned responses.

    A response that is an exception instance is raised instead.
    """

    def __init__(self, **responses):
        self.responses = responses
        self.calls = []

    def __getattr__(self, name):
        if name.startswith('_') or name not in self.responses:
            raise AttributeError(name)

        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            response = self.responses[name]
            if isinstance(response, Exception):
                raise response
            return response

        return method


@pytest.fixture
def make_session(tmp_path):
    """Build a ShellSession whose clients are the given fakes."""
    def factory(output="table", **clients):
        config = ShellConfig(
            region="us-east-2",
            output=output,
            history_file=tmp_path / "history",
        )
        return ShellSession(
            config=config,
            clients=ClientFactory(region=config.region, clients=clients),
        )
    return factory


@pytest.fixture
def session(make_session):
    """Session without AWS clients."""
    return make_session()


@pytest.fixture
def interpreter(session):
    """Interpreter bound to a fresh session."""
    return ShellInterpreter(session)


@pytest.fixture
def fake_client():
    """The FakeClient class, for building canned boto3 clients."""
    return FakeClient
