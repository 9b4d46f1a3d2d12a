"""
Shared fixtures for aptclient tests.
"""

import pytest

from aptclient.api_client import AptClient, ClientConfig

from helpers.factories import TEST_MNEMONIC, mk_account
from helpers.mocks import MockTransport


@pytest.fixture
def test_mnemonic():
    """Standard 12-word BIP-39 test vector."""
    return TEST_MNEMONIC


@pytest.fixture
def account():
    """Deterministic signing account."""
    return mk_account(1)


@pytest.fixture
def transport():
    """Scriptable transport that never touches the network."""
    return MockTransport()


@pytest.fixture
def client(transport):
    """Client wired to the mock transport."""
    return AptClient(ClientConfig(endpoint="http://node.test/v1", poll_interval=0.0), transport=transport)
