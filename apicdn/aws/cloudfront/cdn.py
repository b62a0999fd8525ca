import logging
from dataclasses import dataclass, replace
from typing import Any, Literal, final

import pulumi
import pulumi_aws

from apicdn.aws.cloudfront.dtos import (
    DEFAULT_PATH_PATTERN,
    Behavior,
    BehaviorOptions,
    ErrorResponse,
)
from apicdn.aws.cloudfront.origins import CdnOrigin, OriginSelector, origin_args, resolve_origin
from apicdn.aws.cloudfront.policies import (
    ALL_VIEWER_ORIGIN_REQUEST_POLICY_ID,
    API_CACHE_POLICY,
    CACHING_OPTIMIZED_POLICY_ID,
    CachePolicyConfig,
    server_header_policy_args,
)
from apicdn.aws.waf import WebAcl, api_protection_rules, validate_rate_limit
from apicdn.component import Component, safe_name
from apicdn.context import context
from apicdn.exceptions import DistributionSealedError, DuplicateBehaviorError

logger = logging.getLogger(__name__)

# https://www.pulumi.com/registry/packages/aws/api-docs/cloudfront/distribution/#inputs
CloudfrontPriceClass = Literal["PriceClass_100", "PriceClass_200", "PriceClass_All"]

STATIC_ASSET_PATH_PATTERNS = (
    "*.css",
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.svg",
    "*.woff",
    "*.woff2",
    "*.js",
)
SERVER_ERROR_STATUS_CODES = (500, 501, 502, 503, 504)
# Seconds a 5xx response is served from the edge before the origin is asked again
ERROR_CACHING_TTL = 10

MAX_POLICY_NAME_LENGTH = 128


@final
@dataclass(frozen=True)
class ApiCdnResources:
    distribution: pulumi_aws.cloudfront.Distribution
    web_acl: WebAcl
    cache_policy: pulumi_aws.cloudfront.CachePolicy
    response_headers_policy: pulumi_aws.cloudfront.ResponseHeadersPolicy


@final
class ApiCdn(Component[ApiCdnResources]):
    """CloudFront distribution and WAF web ACL in front of an API.

    Dynamic requests go to the origin through a short-lived cache keyed on the
    ``Authorization`` and ``Host`` headers and the query string. Static assets
    (stylesheets, scripts, images, fonts) use the AWS managed ``CachingOptimized``
    policy. Server errors are cached for a few seconds at the edge.

    Args:
        name: Component name, used to derive resource names.
        origin: Host name of an HTTPS origin, or a load balancer reached over HTTP.
        request_rate_limit: Requests per client IP per 5 minutes before blocking.
        price_class: CloudFront price class.
        cache_policy: Cache settings for dynamic content.
    """

    def __init__(
        self,
        name: str,
        origin: OriginSelector,
        request_rate_limit: int,
        *,
        price_class: CloudfrontPriceClass = "PriceClass_All",
        cache_policy: CachePolicyConfig = API_CACHE_POLICY,
    ):
        validate_rate_limit(request_rate_limit)
        resolved_origin = resolve_origin(origin)
        super().__init__(name)
        self.origin = resolved_origin
        self.request_rate_limit = request_rate_limit
        self.price_class = price_class
        self.cache_policy = cache_policy

        self.default_behavior_options = BehaviorOptions(
            origin_request_policy_id=ALL_VIEWER_ORIGIN_REQUEST_POLICY_ID,
        )
        self.static_behavior_options = replace(
            self.default_behavior_options, cache_policy_id=CACHING_OPTIMIZED_POLICY_ID
        )
        self.error_responses = [
            ErrorResponse(status, ERROR_CACHING_TTL) for status in SERVER_ERROR_STATUS_CODES
        ]
        self._behaviors = [
            Behavior(pattern, self.origin, self.static_behavior_options)
            for pattern in STATIC_ASSET_PATH_PATTERNS
        ]

    @property
    def default_behavior(self) -> Behavior:
        return Behavior(DEFAULT_PATH_PATTERN, self.origin, self.default_behavior_options)

    @property
    def behaviors(self) -> list[Behavior]:
        """Additional behaviors in the order CloudFront evaluates them."""
        return list(self._behaviors)

    @property
    def rules(self) -> list[dict[str, Any]]:
        return api_protection_rules(self.request_rate_limit)

    def add_behavior(self, path_pattern: str, origin: OriginSelector) -> Behavior:
        """Route ``path_pattern`` to ``origin`` using the default (API) behavior options.

        Args:
            path_pattern: CloudFront path pattern, e.g. "/storage/*".
            origin: Host name or load balancer, resolved the same way as the main origin.

        Raises:
            DuplicateBehaviorError: If the pattern is already routed.
            DistributionSealedError: If the distribution has already been created.
        """
        if self.materialized:
            raise DistributionSealedError(self.name)
        if not path_pattern or not path_pattern.strip():
            raise ValueError("Path pattern cannot be empty")
        if path_pattern == DEFAULT_PATH_PATTERN or any(
            b.path_pattern == path_pattern for b in self._behaviors
        ):
            raise DuplicateBehaviorError(self.name, path_pattern)

        behavior = Behavior(path_pattern, resolve_origin(origin), self.default_behavior_options)
        self._behaviors.append(behavior)
        logger.debug(
            "Added behavior %s -> %s to '%s'", path_pattern, behavior.origin.describe(), self.name
        )
        return behavior

    def origin_ids(self) -> dict[CdnOrigin, str]:
        """Origin id per distinct origin, the main origin first."""
        ids: dict[CdnOrigin, str] = {}
        for behavior in [self.default_behavior, *self._behaviors]:
            if behavior.origin not in ids:
                ids[behavior.origin] = f"{self.name}-origin-{len(ids)}"
        return ids

    def _create_resources(self) -> ApiCdnResources:
        web_acl = WebAcl(f"{self.name}-web-acl", self.rules)

        cache_policy = pulumi_aws.cloudfront.CachePolicy(
            context().prefix(f"{self.name}-cache-policy"),
            name=safe_name(
                context().prefix(),
                f"{self.name}-cache",
                MAX_POLICY_NAME_LENGTH,
                pulumi_suffix_length=0,
            ),
            **self.cache_policy.to_resource_args(),
        )

        response_headers_policy = pulumi_aws.cloudfront.ResponseHeadersPolicy(
            context().prefix(f"{self.name}-response-headers-policy"),
            name=safe_name(
                context().prefix(),
                f"{self.name}-headers",
                MAX_POLICY_NAME_LENGTH,
                pulumi_suffix_length=0,
            ),
            **server_header_policy_args(),
        )

        origin_ids = self.origin_ids()

        def cache_behavior_args(behavior: Behavior) -> dict[str, Any]:
            options = behavior.options
            args: dict[str, Any] = {
                "target_origin_id": origin_ids[behavior.origin],
                "viewer_protocol_policy": options.viewer_protocol_policy,
                "allowed_methods": list(options.allowed_methods),
                "cached_methods": list(options.cached_methods),
                "compress": options.compress,
                "cache_policy_id": options.cache_policy_id or cache_policy.id,
                "origin_request_policy_id": options.origin_request_policy_id,
                "response_headers_policy_id": response_headers_policy.id
                if options.use_response_headers_policy
                else None,
            }
            if not behavior.is_default:
                args["path_pattern"] = behavior.path_pattern
            return args

        logger.debug(
            "Creating distribution '%s' with %d origins and %d behaviors",
            self.name,
            len(origin_ids),
            len(self._behaviors) + 1,
        )
        distribution = pulumi_aws.cloudfront.Distribution(
            context().prefix(self.name),
            comment=f"API CDN ({context().prefix(self.name)}/Distribution)",
            enabled=True,
            is_ipv6_enabled=True,
            http_version="http2and3",
            web_acl_id=web_acl.arn,
            price_class=self.price_class,
            origins=[origin_args(origin, origin_id) for origin, origin_id in origin_ids.items()],
            default_cache_behavior=cache_behavior_args(self.default_behavior),
            ordered_cache_behaviors=[cache_behavior_args(b) for b in self._behaviors],
            custom_error_responses=[
                {"error_code": error.http_status, "error_caching_min_ttl": error.ttl}
                for error in self.error_responses
            ],
            restrictions={
                "geo_restriction": {
                    "restriction_type": "none",
                }
            },
            viewer_certificate={
                "cloudfront_default_certificate": True,
            },
        )

        pulumi.export(f"apicdn_{self.name}_domain_name", distribution.domain_name)
        pulumi.export(f"apicdn_{self.name}_distribution_id", distribution.id)
        pulumi.export(f"apicdn_{self.name}_arn", distribution.arn)

        return ApiCdnResources(
            distribution=distribution,
            web_acl=web_acl,
            cache_policy=cache_policy,
            response_headers_policy=response_headers_policy,
        )
