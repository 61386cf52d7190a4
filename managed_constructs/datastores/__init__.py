"""Managed datastore constructs."""

from .dynamodb import DynamoDBTable, resolve_table_props
from .s3 import S3Bucket, resolve_bucket_props, BASELINE_LIFECYCLE_RULE

__all__ = [
    "DynamoDBTable",
    "resolve_table_props",
    "S3Bucket",
    "resolve_bucket_props",
    "BASELINE_LIFECYCLE_RULE",
]
