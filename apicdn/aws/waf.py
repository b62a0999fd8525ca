import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, final

import pulumi
import pulumi_aws

from apicdn.component import Component, safe_name
from apicdn.context import context

logger = logging.getLogger(__name__)

# CloudFront-scoped web ACLs can only be created in us-east-1
WAF_REGION = "us-east-1"
WAF_SCOPE = "CLOUDFRONT"
AWS_VENDOR = "AWS"

MIN_RATE_LIMIT = 10
MAX_RATE_LIMIT = 2_000_000_000
MAX_WEB_ACL_NAME_LENGTH = 128

RATE_BASED_RULE_NAME = "RateBasedRule"


@final
@dataclass(frozen=True, kw_only=True)
class AccountTakeoverConfig:
    """Login endpoint inspected by the account takeover prevention rule group."""

    login_path: str = "/auth/v1/token"
    payload_type: str = "JSON"
    username_field: str = "/email"
    password_field: str = "/password"

    def to_managed_rule_group_config(self) -> dict[str, Any]:
        return {
            "aws_managed_rules_atp_rule_set": {
                "login_path": self.login_path,
                "request_inspection": {
                    "payload_type": self.payload_type,
                    "username_field": {"identifier": self.username_field},
                    "password_field": {"identifier": self.password_field},
                },
            }
        }


def visibility_config(metric_name: str) -> dict[str, Any]:
    return {
        "sampled_requests_enabled": True,
        "cloudwatch_metrics_enabled": True,
        "metric_name": metric_name,
    }


def managed_rule_group_rule(
    name: str,
    priority: int,
    *,
    version: str | None = None,
    excluded_rules: Sequence[str] = (),
    managed_rule_group_configs: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a rule that evaluates an AWS managed rule group.

    The rule is named ``AWS-<group>`` and its matches are left to the group's own
    actions (override action ``none``). Excluded rules are switched to ``count`` so
    they are still reported but never block.
    """
    statement: dict[str, Any] = {
        "vendor_name": AWS_VENDOR,
        "name": name,
    }
    if version:
        statement["version"] = version
    if excluded_rules:
        statement["rule_action_overrides"] = [
            {"name": rule, "action_to_use": {"count": {}}} for rule in excluded_rules
        ]
    if managed_rule_group_configs:
        statement["managed_rule_group_configs"] = managed_rule_group_configs

    rule_name = f"{AWS_VENDOR}-{name}"
    return {
        "name": rule_name,
        "priority": priority,
        "statement": {"managed_rule_group_statement": statement},
        "visibility_config": visibility_config(rule_name),
        "override_action": {"none": {}},
    }


def rate_based_rule(name: str, priority: int, limit: int) -> dict[str, Any]:
    """Build a rule blocking client IPs that exceed ``limit`` requests per 5 minutes."""
    return {
        "name": name,
        "priority": priority,
        "statement": {
            "rate_based_statement": {
                "limit": limit,
                "aggregate_key_type": "IP",
            }
        },
        "visibility_config": visibility_config(name),
        "action": {"block": {}},
    }


def validate_rate_limit(request_rate_limit: int) -> None:
    if isinstance(request_rate_limit, bool) or not isinstance(request_rate_limit, int):
        raise TypeError(
            f"request_rate_limit must be an int, got {type(request_rate_limit).__name__}."
        )
    if not MIN_RATE_LIMIT <= request_rate_limit <= MAX_RATE_LIMIT:
        raise ValueError(
            f"request_rate_limit must be between {MIN_RATE_LIMIT} and {MAX_RATE_LIMIT} "
            f"requests per 5 minutes, got {request_rate_limit}."
        )


def api_protection_rules(
    request_rate_limit: int, login: AccountTakeoverConfig | None = None
) -> list[dict[str, Any]]:
    """Rules protecting an API behind CloudFront, in evaluation order.

    Priorities run from 0 (IP reputation) to 5 (per-IP rate limit).
    """
    validate_rate_limit(request_rate_limit)
    login = login or AccountTakeoverConfig()
    return [
        managed_rule_group_rule("AWSManagedRulesAmazonIpReputationList", 0),
        managed_rule_group_rule("AWSManagedRulesKnownBadInputsRuleSet", 1),
        managed_rule_group_rule("AWSManagedRulesSQLiRuleSet", 2, version="Version_2.0"),
        managed_rule_group_rule(
            "AWSManagedRulesBotControlRuleSet",
            3,
            excluded_rules=["CategoryHttpLibrary", "SignalNonBrowserUserAgent"],
            managed_rule_group_configs=[
                {"aws_managed_rules_bot_control_rule_set": {"inspection_level": "COMMON"}}
            ],
        ),
        managed_rule_group_rule(
            "AWSManagedRulesATPRuleSet",
            4,
            excluded_rules=["SignalMissingCredential"],
            managed_rule_group_configs=[login.to_managed_rule_group_config()],
        ),
        rate_based_rule(RATE_BASED_RULE_NAME, 5, request_rate_limit),
    ]


@final
@dataclass(frozen=True)
class WebAclResources:
    web_acl: pulumi_aws.wafv2.WebAcl
    provider: pulumi_aws.Provider


@final
class WebAcl(Component[WebAclResources]):
    """WAFv2 web ACL with CloudFront scope.

    Rules are evaluated in the order of their priorities; requests that match no
    blocking rule are allowed.
    """

    def __init__(self, name: str, rules: list[dict[str, Any]]):
        super().__init__(name)
        priorities = [rule["priority"] for rule in rules]
        if len(set(priorities)) != len(priorities):
            raise ValueError(f"Web ACL '{name}' has rules with duplicate priorities.")
        self.rules = sorted(rules, key=lambda rule: rule["priority"])

    @property
    def arn(self) -> pulumi.Output[str]:
        return self.resources.web_acl.arn

    def _create_resources(self) -> WebAclResources:
        provider = pulumi_aws.Provider(
            context().prefix(f"{self.name}-{WAF_REGION}-provider"),
            region=WAF_REGION,
        )

        acl_name = safe_name(context().prefix(), self.name, MAX_WEB_ACL_NAME_LENGTH)
        logger.debug("Creating web ACL %s with %d rules", acl_name, len(self.rules))
        web_acl = pulumi_aws.wafv2.WebAcl(
            acl_name,
            scope=WAF_SCOPE,
            description=f"Web ACL for {self.name}",
            default_action={"allow": {}},
            visibility_config=visibility_config(self.name),
            rules=self.rules,
            opts=pulumi.ResourceOptions(provider=provider),
        )

        pulumi.export(f"webacl_{self.name}_arn", web_acl.arn)

        return WebAclResources(web_acl=web_acl, provider=provider)
