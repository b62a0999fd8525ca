import pulumi_aws

from apicdn.app import CdnApp
from apicdn.aws.cloudfront import ApiCdn
from apicdn.config import AppConfig, AwsConfig

app = CdnApp("lb-cdn")


@app.config
def configuration(env: str) -> AppConfig:
    return AppConfig(
        aws=AwsConfig(region="eu-central-1" if env == "production" else None),
        environments=["staging", "production"],
    )


@app.run
def run() -> None:
    vpc = pulumi_aws.ec2.get_vpc(default=True)
    subnets = pulumi_aws.ec2.get_subnets(filters=[{"name": "vpc-id", "values": [vpc.id]}])

    # TLS ends at CloudFront, the balancer only listens on port 80
    alb = pulumi_aws.lb.LoadBalancer(
        "api-alb",
        load_balancer_type="application",
        subnets=subnets.ids,
    )

    cdn = ApiCdn("api", alb, request_rate_limit=1000)
    cdn.add_behavior("/realtime/*", alb)
