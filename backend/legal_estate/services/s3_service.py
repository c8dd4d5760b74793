# legal_estate/services/s3_service.py

import boto3
from botocore.exceptions import ClientError
from typing import Optional

from legal_estate.core.config import settings
from legal_estate.core.logger import logger


class S3Service:
    """
    Service layer for AWS S3 operations.
    """

    def __init__(self, bucket: Optional[str] = None, client=None):
        self.s3_client = client or boto3.client(
            's3',
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None
        )
        self.bucket = bucket or settings.S3_BUCKET_NAME

    def upload_bytes(self, s3_key: str, content: bytes, content_type: str) -> None:
        """
        Store an object in the configured bucket.
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=s3_key,
                Body=content,
                ContentType=content_type,
            )
            logger.info(f"Uploaded to S3: {s3_key} ({len(content)} bytes)")
        except ClientError as e:
            logger.error(f"Failed to upload {s3_key}: {str(e)}")
            raise

    def delete_object(self, s3_key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=s3_key)
            logger.info(f"Deleted from S3: {s3_key}")
        except ClientError as e:
            logger.error(f"Failed to delete {s3_key}: {str(e)}")
            raise

