"""AWS components for apicdn."""

from apicdn.aws.cloudfront import ApiCdn, ApiCdnResources
from apicdn.aws.waf import AccountTakeoverConfig, WebAcl, WebAclResources

__all__ = [
    "AccountTakeoverConfig",
    "ApiCdn",
    "ApiCdnResources",
    "WebAcl",
    "WebAclResources",
]
