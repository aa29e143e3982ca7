"""S3 / MinIO helpers for published app bundles.

Bundle keys are always built here from the owner id and app name
(``apps/{owner}/{app_name}/index.html``), never taken from the client.
"""

import logging
import os
from urllib.parse import quote, urlparse, urlunparse

import boto3
from botocore.config import Config

from app_builder.core.config import settings
from app_builder.core.exceptions import PublishError

logger = logging.getLogger(__name__)

PRESIGN_DOWNLOAD_EXPIRES = 3600  # 1 h

_minio_cred_warned = False


def _get_s3_client():  # type: ignore[no-untyped-def]
    global _minio_cred_warned  # noqa: PLW0603
    config_kwargs: dict = {"signature_version": "s3v4"}
    if settings.S3_ENDPOINT_URL:
        config_kwargs["s3"] = {"addressing_style": "path"}
    kwargs: dict = {
        "service_name": "s3",
        "region_name": settings.AWS_REGION,
        "config": Config(**config_kwargs),
    }
    if settings.S3_ENDPOINT_URL:
        kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL
    if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY

    # MinIO with real AWS creds in the environment signs requests MinIO rejects
    if settings.S3_ENDPOINT_URL and not _minio_cred_warned:
        env_key = os.environ.get("AWS_ACCESS_KEY_ID", "")
        if env_key.startswith("AKIA") and (
            not settings.AWS_ACCESS_KEY_ID or settings.AWS_ACCESS_KEY_ID.startswith("AKIA")
        ):
            logger.warning(
                "S3_ENDPOINT_URL points to MinIO but AWS_ACCESS_KEY_ID looks like a "
                "real AWS key (AKIA...). Bundle uploads will be rejected by MinIO."
            )
        _minio_cred_warned = True

    return boto3.client(**kwargs)


def _rewrite_public_url(url: str) -> str:
    """Swap scheme+netloc to S3_PUBLIC_ENDPOINT so browsers can reach MinIO."""
    if not settings.S3_PUBLIC_ENDPOINT:
        return url
    public = urlparse(settings.S3_PUBLIC_ENDPOINT)
    parsed = urlparse(url)
    return urlunparse(parsed._replace(scheme=public.scheme, netloc=public.netloc))


def build_bundle_key(owner_id: str, app_name: str) -> str:
    safe_owner = quote(owner_id.strip(), safe="._-")
    return f"apps/{safe_owner}/{app_name}/index.html"


def put_bundle(key: str, body: bytes, content_type: str = "text/html; charset=utf-8") -> str:
    """Upload a bundle and return its ``s3://`` location."""
    if not settings.S3_BUCKET:
        raise PublishError("Bundle storage is not configured (S3_BUCKET).", step="upload")
    client = _get_s3_client()
    client.put_object(
        Bucket=settings.S3_BUCKET,
        Key=key,
        Body=body,
        ContentType=content_type,
        CacheControl="no-cache",
    )
    return f"s3://{settings.S3_BUCKET}/{key}"


def presign_get(key: str, expires: int = PRESIGN_DOWNLOAD_EXPIRES) -> str:
    """Generate a presigned GET URL the deploy API can fetch the bundle from."""
    client = _get_s3_client()
    url = client.generate_presigned_url(
        "get_object",
        Params={"Bucket": settings.S3_BUCKET, "Key": key},
        ExpiresIn=expires,
    )
    return _rewrite_public_url(url)
