"""
conftest.py

Shared fixtures: a well-formed capability declaration and builders for
variations of it.
"""

import pytest

from chainassert import (
    MIN_UNIX_EPOCH,
    Allow,
    BlockIdentifier,
    Error,
    NetworkIdentifier,
    NetworkOptionsResponse,
    NetworkStatusResponse,
    OperationStatus,
    Peer,
    Version,
)


def make_status(**overrides) -> NetworkStatusResponse:
    """A status response that passes every check unless overridden."""
    fields = dict(
        genesis_block_identifier=BlockIdentifier(index=0, hash="block 0"),
        current_block_identifier=BlockIdentifier(index=100, hash="block 100"),
        current_block_timestamp=MIN_UNIX_EPOCH + 1,
        peers=(Peer(peer_id="peer 1"),),
    )
    fields.update(overrides)
    return NetworkStatusResponse(**fields)


def make_options(**allow_overrides) -> NetworkOptionsResponse:
    """An options response that passes every check unless overridden."""
    allow_fields = dict(
        operation_statuses=(OperationStatus(status="Success", successful=True),),
        operation_types=("Transfer",),
        errors=(Error(code=1, message="error", retriable=True),),
    )
    allow_fields.update(allow_overrides)
    return NetworkOptionsResponse(
        version=Version(rosetta_version="1.2.3", node_version="1.0"),
        allow=Allow(**allow_fields),
    )


@pytest.fixture
def valid_network() -> NetworkIdentifier:
    return NetworkIdentifier(blockchain="hello", network="world")


@pytest.fixture
def valid_status() -> NetworkStatusResponse:
    return make_status()


@pytest.fixture
def valid_options() -> NetworkOptionsResponse:
    return make_options()
