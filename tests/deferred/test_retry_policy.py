from __future__ import annotations

import pytest

from defer_client import (
    RETRY_MAX_ATTEMPTS_PLACEHOLDER,
    InvalidConfigurationError,
    RetryPolicy,
    resolve_retry_policy,
)


def test_missing_retry_disables_retries_with_default_intervals():
    policy = resolve_retry_policy(None)
    assert policy == RetryPolicy(
        max_attempts=0,
        initial_interval=30,
        randomization_factor=0.5,
        multiplier=1.5,
        max_interval=600,
    )


def test_boolean_retry_toggles_platform_default():
    assert resolve_retry_policy(True).max_attempts == RETRY_MAX_ATTEMPTS_PLACEHOLDER
    assert resolve_retry_policy(False) == resolve_retry_policy(None)


def test_true_and_empty_mapping_resolve_to_same_attempts():
    assert resolve_retry_policy(True).max_attempts == resolve_retry_policy({}).max_attempts


def test_integer_retry_is_used_verbatim():
    assert resolve_retry_policy(5).max_attempts == 5
    assert resolve_retry_policy(0).max_attempts == 0


def test_negative_integer_retry_is_rejected():
    with pytest.raises(InvalidConfigurationError, match=">= 0"):
        resolve_retry_policy(-1)


def test_partial_mapping_overrides_only_present_fields():
    policy = resolve_retry_policy({"max_attempts": 4, "multiplier": 2.0})
    assert policy.max_attempts == 4
    assert policy.multiplier == 2.0
    assert policy.initial_interval == 30
    assert policy.max_interval == 600


def test_mapping_without_attempts_uses_platform_default():
    options = {"initial_interval": 5}
    policy = resolve_retry_policy(options)
    assert policy.max_attempts == RETRY_MAX_ATTEMPTS_PLACEHOLDER
    assert policy.initial_interval == 5
    # caller input is left untouched
    assert options == {"initial_interval": 5}


def test_mapping_with_zero_attempts_uses_platform_default():
    assert (
        resolve_retry_policy({"max_attempts": 0}).max_attempts
        == RETRY_MAX_ATTEMPTS_PLACEHOLDER
    )


@pytest.mark.parametrize(
    "retry",
    ["3", 1.5, [1, 2], object(), {"attempts": 3}, {"multiplier": "fast"}],
)
def test_unrecognized_retry_shapes_are_rejected(retry):
    with pytest.raises(InvalidConfigurationError):
        resolve_retry_policy(retry)


def test_retry_policy_wire_form_uses_camel_case():
    assert resolve_retry_policy(2).as_dict() == {
        "maxAttempts": 2,
        "initialInterval": 30,
        "randomizationFactor": 0.5,
        "multiplier": 1.5,
        "maxInterval": 600,
    }
