"""S3 client factory for S3Hero profiles.

Creates boto3 S3 clients configured for each profile, with the correct
endpoint, credentials, region, and addressing style.

Cloudflare R2 endpoints are derived from the account id when no explicit
endpoint is configured.
"""

from typing import Any, Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

import s3hero.logging
from s3hero.models import Profile, ProviderType

R2_ENDPOINT_TEMPLATE = "https://{account_id}.r2.cloudflarestorage.com"
DEFAULT_AWS_REGION = "us-east-1"
R2_REGION = "auto"


class ConnectionCheckError(Exception):
    """Raised when a profile cannot reach its S3 service."""

    pass


def resolve_endpoint(profile: Profile) -> Optional[str]:
    """Determine the endpoint URL for a profile.

    Returns:
        The explicit endpoint when set, the R2 account endpoint for
        Cloudflare profiles, or None to let boto3 pick the AWS endpoint.
    """
    if profile.endpoint:
        return profile.endpoint

    if profile.provider == ProviderType.CLOUDFLARE and profile.account_id:
        return R2_ENDPOINT_TEMPLATE.format(account_id=profile.account_id)

    return None


def resolve_region(profile: Profile) -> str:
    if profile.region:
        return profile.region
    if profile.provider == ProviderType.CLOUDFLARE:
        return R2_REGION
    return DEFAULT_AWS_REGION


def build_s3_client(profile: Profile):
    """Build a boto3 S3 client for the given profile.

    Args:
        profile: Profile containing provider, credentials, region and
                 optional endpoint.

    Returns:
        A boto3 S3 client configured for the profile.

    Note:
        Custom endpoints (MinIO, Garage, ...) rarely support virtual-hosted
        buckets, so they use path addressing.
    """
    addressing_style = "path" if profile.provider == ProviderType.CUSTOM else "virtual"
    boto_config = Config(
        signature_version="s3v4",
        s3={"addressing_style": addressing_style},
    )

    endpoint_url = resolve_endpoint(profile)
    s3hero.logging.debug(
        "Building S3 client for profile '%s' (endpoint=%s)",
        profile.name,
        endpoint_url or "aws-default",
    )

    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=profile.access_key_id,
        aws_secret_access_key=profile.secret_access_key,
        region_name=resolve_region(profile),
        config=boto_config,
    )


def check_connection(s3_client: Any) -> int:
    """Verify that the client's credentials are accepted.

    Args:
        s3_client: boto3 S3 client

    Returns:
        Number of buckets visible to the credentials.

    Raises:
        ConnectionCheckError: If the service rejects the request or
                              cannot be reached.
    """
    try:
        response = s3_client.list_buckets()
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "Unknown")
        raise ConnectionCheckError(f"Service rejected credentials ({code})") from e
    except BotoCoreError as e:
        raise ConnectionCheckError(f"Could not reach service: {e}") from e

    return len(response.get("Buckets", []))
