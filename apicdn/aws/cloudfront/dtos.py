from dataclasses import dataclass
from typing import Literal, TypeAlias, final

from apicdn.aws.cloudfront.origins import CdnOrigin

ViewerProtocolPolicy: TypeAlias = Literal["allow-all", "https-only", "redirect-to-https"]

ALLOW_ALL_METHODS = ("GET", "HEAD", "OPTIONS", "PUT", "PATCH", "POST", "DELETE")
CACHE_GET_HEAD = ("GET", "HEAD")

DEFAULT_PATH_PATTERN = "*"


@final
@dataclass(frozen=True, kw_only=True)
class BehaviorOptions:
    """Caching and forwarding settings shared by one or more behaviors.

    ``cache_policy_id`` of None means the distribution's own API cache policy.
    """

    viewer_protocol_policy: ViewerProtocolPolicy = "redirect-to-https"
    allowed_methods: tuple[str, ...] = ALLOW_ALL_METHODS
    cached_methods: tuple[str, ...] = CACHE_GET_HEAD
    cache_policy_id: str | None = None
    origin_request_policy_id: str | None = None
    use_response_headers_policy: bool = True
    compress: bool = True


@final
@dataclass(frozen=True)
class Behavior:
    path_pattern: str
    origin: CdnOrigin
    options: BehaviorOptions

    @property
    def is_default(self) -> bool:
        return self.path_pattern == DEFAULT_PATH_PATTERN


@final
@dataclass(frozen=True)
class ErrorResponse:
    http_status: int
    ttl: int
