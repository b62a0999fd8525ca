from typing import Any

from pulumi.runtime import MockCallArgs, MockResourceArgs, Mocks

DEFAULT_REGION = "us-east-1"
ACCOUNT_ID = "123456789012"
TEST_USER = "test-user"
LOAD_BALANCER_TYPES = ("aws:lb/loadBalancer:LoadBalancer", "aws:alb/loadBalancer:LoadBalancer")


# test id
def tid(name: str) -> str:
    return name + "-test-id"


# test name
def tn(name: str) -> str:
    return name + "-test-name"


class PulumiTestMocks(Mocks):
    """Base Pulumi test mocks for all AWS resource testing."""

    def __init__(self):
        super().__init__()
        self.created_resources: list[MockResourceArgs] = []

    def new_resource(self, args: MockResourceArgs) -> tuple[str, dict[str, Any]]:
        self.created_resources.append(args)
        resource_id = tid(args.name)
        name = tn(args.name)
        output_props = args.inputs | {"name": name}

        region = DEFAULT_REGION
        account_id = ACCOUNT_ID

        if args.typ == "aws:wafv2/webAcl:WebAcl":
            output_props["arn"] = (
                f"arn:aws:wafv2:{region}:{account_id}:global/webacl/{name}/{resource_id}"
            )
        elif args.typ == "aws:cloudfront/distribution:Distribution":
            output_props["arn"] = f"arn:aws:cloudfront::{account_id}:distribution/{resource_id}"
            output_props["domainName"] = f"{resource_id}.cloudfront.net"
        elif args.typ in LOAD_BALANCER_TYPES:
            output_props["arn"] = (
                f"arn:aws:elasticloadbalancing:{region}:{account_id}:loadbalancer/app/{name}"
            )
            output_props["dnsName"] = f"{name}.{region}.elb.amazonaws.com"

        return resource_id, output_props

    def call(self, args: MockCallArgs) -> tuple[dict, list[tuple[str, str]] | None]:
        if args.token == "aws:index/getCallerIdentity:getCallerIdentity":  # noqa: S105
            return {
                "accountId": ACCOUNT_ID,
                "arn": f"arn:aws:iam::{ACCOUNT_ID}:user/{TEST_USER}",
                "userId": f"{TEST_USER}-id",
            }, []
        if args.token == "aws:index/getRegion:getRegion":  # noqa: S105
            return {"name": "us-east-1", "description": "US East (N. Virginia)"}, []

        return {}, []

    def _filter_created(self, typ: str, name: str | None = None) -> list[MockResourceArgs]:
        return [r for r in self.created_resources if r.typ == typ and (not name or r.name == name)]

    # CloudFront resource helpers
    def created_cloudfront_distributions(self, name: str | None = None) -> list[MockResourceArgs]:
        return self._filter_created("aws:cloudfront/distribution:Distribution", name)

    def created_cache_policies(self, name: str | None = None) -> list[MockResourceArgs]:
        return self._filter_created("aws:cloudfront/cachePolicy:CachePolicy", name)

    def created_response_headers_policies(
        self, name: str | None = None
    ) -> list[MockResourceArgs]:
        return self._filter_created(
            "aws:cloudfront/responseHeadersPolicy:ResponseHeadersPolicy", name
        )

    # WAF resource helpers
    def created_web_acls(self, name: str | None = None) -> list[MockResourceArgs]:
        return self._filter_created("aws:wafv2/webAcl:WebAcl", name)

    def created_providers(self, name: str | None = None) -> list[MockResourceArgs]:
        return self._filter_created("pulumi:providers:aws", name)
