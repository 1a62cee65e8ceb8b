"""Ownership check tests."""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from tasklist.auth.ownership import authorize_account_target, authorize_ownership

alice = SimpleNamespace(id=1)
bob = SimpleNamespace(id=2)


def test_owner_gets_record():
    record = SimpleNamespace(id=10, user_id=1)
    assert authorize_ownership(alice, record) is record


def test_missing_record_is_not_found():
    with pytest.raises(HTTPException) as exc:
        authorize_ownership(alice, None)
    assert exc.value.status_code == 404
    assert exc.value.detail == "Todo not found"


def test_foreign_record_is_indistinguishable_from_missing():
    record = SimpleNamespace(id=10, user_id=2)
    with pytest.raises(HTTPException) as foreign:
        authorize_ownership(alice, record)
    with pytest.raises(HTTPException) as missing:
        authorize_ownership(alice, None)
    assert foreign.value.status_code == missing.value.status_code == 404
    assert foreign.value.detail == missing.value.detail


def test_resource_name_in_message():
    with pytest.raises(HTTPException) as exc:
        authorize_ownership(alice, None, resource="List")
    assert exc.value.detail == "List not found"


def test_account_target_matches():
    authorize_account_target(bob, 2)


def test_account_target_mismatch_is_forbidden():
    with pytest.raises(HTTPException) as exc:
        authorize_account_target(alice, 2)
    assert exc.value.status_code == 403
    assert exc.value.detail == "You can only delete your own account"
