from apicdn.app import CdnApp
from apicdn.aws.cloudfront import ApiCdn
from apicdn.config import AppConfig, AwsConfig

app = CdnApp("api-cdn")


@app.config
def configuration(_env: str) -> AppConfig:
    return AppConfig(
        aws=AwsConfig(
            # region="eu-west-1",        # Uncomment to override AWS CLI/env var region
            # profile="your-profile",    # Uncomment to use specific AWS profile
        ),
    )


@app.run
def run() -> None:
    """
    *.css, *.js, images, fonts  --> api.example.com, long-lived managed cache
    /storage/v1/*               --> storage.example.com
    everything else             --> api.example.com, 2s API cache
    """
    cdn = ApiCdn("api", "api.example.com", request_rate_limit=2000)
    cdn.add_behavior("/storage/v1/*", "storage.example.com")
