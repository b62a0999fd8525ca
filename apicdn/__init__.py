"""CloudFront and WAF in front of an API, as a Pulumi component."""
