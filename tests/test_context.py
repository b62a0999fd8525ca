"""Tests for context module and resource naming."""

from hashlib import sha256

import pytest

from apicdn.component import safe_name
from apicdn.config import AwsConfig
from apicdn.context import AppContext, _ContextStore, context


def _calculate_expected_hash(name: str) -> str:
    return sha256(name.encode()).hexdigest()[:7]


def test_context_returns_current_app_context():
    ctx = context()

    assert ctx.name == "test"
    assert ctx.env == "test"
    assert ctx.aws == AwsConfig(profile="default", region="us-east-1")


def test_context_not_initialized():
    _ContextStore.clear()

    with pytest.raises(RuntimeError, match="context not initialized"):
        context()


def test_context_can_only_be_set_once():
    with pytest.raises(RuntimeError, match="already been initialized"):
        _ContextStore.set(AppContext(name="other", env="dev", aws=AwsConfig()))


def test_prefix_lowercases_app_and_env():
    ctx = AppContext(name="MyApp", env="Prod", aws=AwsConfig())

    assert ctx.prefix() == "myapp-prod-"
    assert ctx.prefix("api") == "myapp-prod-api"


def test_short_name_no_truncation():
    result = safe_name("myapp-prod-", "api-web-acl", 128)
    assert result == "myapp-prod-api-web-acl"


def test_policy_name_without_pulumi_suffix():
    # CloudFront policies are named explicitly, Pulumi adds nothing
    long_name = "p" * 130
    result = safe_name("myapp-prod-", long_name, 128, pulumi_suffix_length=0)

    expected_hash = _calculate_expected_hash(long_name)
    # 128 - 11 (prefix) - 8 (hash+dash) = 109 chars for truncated name
    assert result == f"myapp-prod-{'p' * 109}-{expected_hash}"
    assert len(result) == 128


def test_web_acl_name_leaves_room_for_pulumi_suffix():
    long_name = "w" * 200
    result = safe_name("myapp-prod-", long_name, 128)

    assert len(result) == 128 - 8
    assert result.endswith(f"-{_calculate_expected_hash(long_name)}")


def test_suffix_is_kept():
    result = safe_name("app-", "api", 30, "-cache")
    assert result == "app-api-cache"


def test_truncation_deterministic():
    long_name = "very-long-name-that-will-definitely-be-truncated"
    assert safe_name("test-", long_name, 30, "-r") == safe_name("test-", long_name, 30, "-r")


def test_error_insufficient_space():
    with pytest.raises(ValueError, match="Cannot create safe name"):
        safe_name("very-long-prefix-", "name", 10, "-suffix")


def test_error_insufficient_space_for_hash():
    with pytest.raises(ValueError, match="Not enough space for name truncation"):
        safe_name("prefix-", "a" * 20, 20, pulumi_suffix_length=5)


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_name_raises_error(name):
    with pytest.raises(ValueError, match="Name cannot be empty or whitespace-only"):
        safe_name("prefix-", name, 20)


def test_exactly_at_truncation_boundary():
    # Available space: 30 - 5 (prefix) - 2 (suffix) - 8 (pulumi) = 15 chars
    result = safe_name("test-", "a" * 15, 30, "-r")
    assert result == f"test-{'a' * 15}-r"

    result = safe_name("test-", "a" * 16, 30, "-r")
    expected_hash = _calculate_expected_hash("a" * 16)
    assert result == f"test-{'a' * 7}-{expected_hash}-r"
