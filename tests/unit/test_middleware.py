"""Unit tests for request-id handling"""

import pytest
from vaultswipe.api.middleware import resolve_request_id


@pytest.mark.parametrize("incoming", ["req-123", "a.b_c-9", "x" * 64])
def test_resolve_request_id_reuses_safe_ids(incoming):
    assert resolve_request_id(incoming) == incoming


@pytest.mark.parametrize("incoming", [None, "", "x" * 65, "has space", "trailing\n", "{json}"])
def test_resolve_request_id_mints_new(incoming):
    minted = resolve_request_id(incoming)
    assert minted != incoming
    assert len(minted) == 32
