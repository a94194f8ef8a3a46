"""
Shared fixtures.

No fixture touches the network: every exchange goes through a
ScriptedTransport with answers queued by the test.
"""

import logging

import pytest

from wikiapi_client.credentials import PasswordCredentials
from wikiapi_client.session import Session
from wikiapi_client.transport.scripted import ScriptedTransport

from helpers import REQUIRED_RELEASE_LINES, DialectCoverage, password_login_script


@pytest.fixture(scope="session")
def dialect_coverage():
    """
    Fresh coverage recorder for this test run.

    Once the run is over, every required release line must have been logged
    in against, provided any login was recorded at all.
    """
    coverage = DialectCoverage()
    yield coverage
    if coverage.seen():
        assert coverage.missing(REQUIRED_RELEASE_LINES) == []


@pytest.fixture
def transport():
    """Scripted transport for query traffic."""
    return ScriptedTransport()


@pytest.fixture
def auth_transport():
    """Scripted transport for authentication traffic, kept apart from query traffic."""
    return ScriptedTransport()


@pytest.fixture
def anonymous_session(transport):
    return Session.anonymous(transport)


@pytest.fixture
def credentials():
    return PasswordCredentials("ExampleBot", "hunter2")


@pytest.fixture
def logged_in_session(auth_transport, credentials):
    """Session logged in through ``auth_transport``; the login answers are consumed."""
    auth_transport.enqueue(*password_login_script())
    return Session.login(auth_transport, credentials)


@pytest.fixture
def restore_log_level():
    logger = logging.getLogger("wikiapi_client")
    level = logger.level
    yield logger
    logger.setLevel(level)
