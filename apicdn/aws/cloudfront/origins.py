from dataclasses import dataclass
from typing import Any, ClassVar, Literal, TypeAlias, final

import pulumi
import pulumi_aws

OriginProtocolPolicy: TypeAlias = Literal["http-only", "https-only", "match-viewer"]
# pulumi_aws.alb and pulumi_aws.lb declare the same ELBv2 balancer as unrelated classes
ElbV2LoadBalancer: TypeAlias = pulumi_aws.lb.LoadBalancer | pulumi_aws.alb.LoadBalancer


@final
@dataclass(frozen=True)
class HostOrigin:
    """Origin reached directly by host name over HTTPS."""

    domain_name: str
    protocol_policy: ClassVar[OriginProtocolPolicy] = "https-only"

    def __post_init__(self) -> None:
        if not self.domain_name or not self.domain_name.strip():
            raise ValueError("Origin host name cannot be empty")
        if "://" in self.domain_name or "/" in self.domain_name:
            raise ValueError(
                f"Invalid origin host name '{self.domain_name}'. "
                "Pass a bare host name such as 'api.example.com', without scheme or path."
            )

    @property
    def origin_domain(self) -> str:
        return self.domain_name

    def describe(self) -> str:
        return self.domain_name


@final
@dataclass(frozen=True)
class LoadBalancerOrigin:
    """Origin behind an application or network load balancer, reached over HTTP."""

    load_balancer: ElbV2LoadBalancer
    protocol_policy: ClassVar[OriginProtocolPolicy] = "http-only"

    @property
    def origin_domain(self) -> pulumi.Output[str]:
        return self.load_balancer.dns_name

    def describe(self) -> str:
        return "load balancer"


CdnOrigin: TypeAlias = HostOrigin | LoadBalancerOrigin
OriginSelector: TypeAlias = str | ElbV2LoadBalancer | CdnOrigin


def resolve_origin(origin: OriginSelector) -> CdnOrigin:
    """Turn a host name or load balancer into the matching origin variant."""
    match origin:
        case HostOrigin() | LoadBalancerOrigin():
            return origin
        case str():
            return HostOrigin(origin.strip())
        case pulumi_aws.lb.LoadBalancer() | pulumi_aws.alb.LoadBalancer():
            return LoadBalancerOrigin(origin)
        case _:
            raise TypeError(
                "origin must be a host name string or a load balancer, got "
                f"{type(origin).__module__}.{type(origin).__qualname__}."
            )


def origin_args(origin: CdnOrigin, origin_id: str) -> dict[str, Any]:
    return {
        "origin_id": origin_id,
        "domain_name": origin.origin_domain,
        "custom_origin_config": {
            "http_port": 80,
            "https_port": 443,
            "origin_protocol_policy": origin.protocol_policy,
            "origin_ssl_protocols": ["TLSv1.2"],
        },
    }
