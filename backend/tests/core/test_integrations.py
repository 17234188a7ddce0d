"""Tests for IntegrationRecord transitions: pure, version untouched."""

from datetime import datetime, timezone

import pytest

from reflect_mirror.core.errors import BusinessRuleError
from reflect_mirror.core.integrations import (
    IntegrationRecord, apply_authority_transfer, apply_config_update,
    apply_flow_initialized, apply_key_rotation, apply_metadata,
    apply_token_initialized, apply_vault_initialized, apply_whitelist,
)

T0 = datetime(2025, 12, 1, tzinfo=timezone.utc)
AUTHORITY = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
USER_A = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"
USER_B = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def _record(**overrides) -> IntegrationRecord:
    values = dict(
        integration_id="a" * 32, authority=AUTHORITY, name="Acme",
        stablecoin="rUSD", fee_bps=0, api_key="rfl_secretkey1234",
        key_version=1, key_rotated_at=T0, created_at=T0, updated_at=T0,
    )
    values.update(overrides)
    return IntegrationRecord(**values)


def test_config_update_only_changes_given_fields():
    updated = apply_config_update(_record(), fee_bps=30, name=None)
    assert updated.fee_bps == 30
    assert updated.name == "Acme"
    assert updated.version == 1


def test_metadata_sets_branded_token():
    updated = apply_metadata(_record(), "Acme Dollar", "aUSD", "ipfs://cid")
    assert (updated.token_name, updated.token_symbol, updated.token_uri) == (
        "Acme Dollar", "aUSD", "ipfs://cid",
    )


def test_whitelist_counts_only_new_users():
    record, added = apply_whitelist(_record(), [USER_A, USER_B, USER_A], max_users=10)
    assert added == 2
    record, added = apply_whitelist(record, [USER_A], max_users=10)
    assert added == 0
    assert record.whitelist == frozenset({USER_A, USER_B})


def test_whitelist_limit():
    with pytest.raises(BusinessRuleError) as exc_info:
        apply_whitelist(_record(), [USER_A, USER_B], max_users=1)
    assert exc_info.value.code == "WHITELIST_LIMIT_REACHED"
    assert exc_info.value.http_status == 409


def test_authority_transfer_rejects_same_authority():
    assert apply_authority_transfer(_record(), USER_A).authority == USER_A
    with pytest.raises(BusinessRuleError):
        apply_authority_transfer(_record(), AUTHORITY)


def test_key_rotation_bumps_key_version():
    later = datetime(2025, 12, 2, tzinfo=timezone.utc)
    rotated = apply_key_rotation(_record(), "rfl_newkey", later)
    assert rotated.api_key == "rfl_newkey"
    assert rotated.key_version == 2
    assert rotated.key_rotated_at == later


@pytest.mark.parametrize("apply,flag,code", [
    (apply_token_initialized, "token_initialized", "TOKEN_ALREADY_INITIALIZED"),
    (apply_vault_initialized, "vault_initialized", "VAULT_ALREADY_INITIALIZED"),
])
def test_initialize_once(apply, flag, code):
    record = apply(_record())
    assert getattr(record, flag) is True
    with pytest.raises(BusinessRuleError) as exc_info:
        apply(record)
    assert exc_info.value.code == code


def test_flows_are_unique():
    record = apply_flow_initialized(_record(), "checkout")
    assert record.flows == ("checkout",)
    with pytest.raises(BusinessRuleError):
        apply_flow_initialized(record, "checkout")
