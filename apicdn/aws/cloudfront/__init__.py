from .cdn import ApiCdn, ApiCdnResources, CloudfrontPriceClass
from .dtos import Behavior, BehaviorOptions, ErrorResponse
from .origins import CdnOrigin, HostOrigin, LoadBalancerOrigin, OriginSelector, resolve_origin
from .policies import CachePolicyConfig

__all__ = [
    "ApiCdn",
    "ApiCdnResources",
    "Behavior",
    "BehaviorOptions",
    "CachePolicyConfig",
    "CdnOrigin",
    "CloudfrontPriceClass",
    "ErrorResponse",
    "HostOrigin",
    "LoadBalancerOrigin",
    "OriginSelector",
    "resolve_origin",
]
