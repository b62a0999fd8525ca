from dataclasses import dataclass
from typing import Any, Literal, final

# AWS managed policies, identical in every account
# https://docs.aws.amazon.com/AmazonCloudFront/latest/DeveloperGuide/using-managed-cache-policies.html
CACHING_OPTIMIZED_POLICY_ID = "658327ea-f89d-4fab-a63d-7e88639e58f6"
ALL_VIEWER_ORIGIN_REQUEST_POLICY_ID = "216adef6-5c7f-47e4-b989-5492eafa07d3"

SERVER_HEADER_VALUE = "cloudfront"


@final
@dataclass(frozen=True, kw_only=True)
class CachePolicyConfig:
    """Cache key and TTL settings, in seconds."""

    min_ttl: int = 0
    max_ttl: int = 600
    default_ttl: int = 2
    headers: tuple[str, ...] = ("Authorization", "Host")
    query_strings: Literal["all", "none"] = "all"
    enable_gzip: bool = True
    enable_brotli: bool = True
    comment: str = "Policy for API"

    def __post_init__(self) -> None:
        if self.min_ttl < 0:
            raise ValueError(f"min_ttl cannot be negative, got {self.min_ttl}.")
        if not self.min_ttl <= self.default_ttl <= self.max_ttl:
            raise ValueError(
                "Cache TTLs must satisfy min_ttl <= default_ttl <= max_ttl, got "
                f"min={self.min_ttl}, default={self.default_ttl}, max={self.max_ttl}."
            )

    def to_resource_args(self) -> dict[str, Any]:
        headers_config: dict[str, Any] = {"header_behavior": "none"}
        if self.headers:
            headers_config = {
                "header_behavior": "whitelist",
                "headers": {"items": list(self.headers)},
            }
        return {
            "comment": self.comment,
            "min_ttl": self.min_ttl,
            "max_ttl": self.max_ttl,
            "default_ttl": self.default_ttl,
            "parameters_in_cache_key_and_forwarded_to_origin": {
                "headers_config": headers_config,
                "query_strings_config": {"query_string_behavior": self.query_strings},
                "cookies_config": {"cookie_behavior": "none"},
                "enable_accept_encoding_gzip": self.enable_gzip,
                "enable_accept_encoding_brotli": self.enable_brotli,
            },
        }


API_CACHE_POLICY = CachePolicyConfig()


def server_header_policy_args(value: str = SERVER_HEADER_VALUE) -> dict[str, Any]:
    """Response headers policy replacing whatever ``server`` header the origin sends."""
    return {
        "comment": "Policy for API",
        "custom_headers_config": {
            "items": [{"header": "server", "value": value, "override": True}],
        },
    }
