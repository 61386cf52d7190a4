"""
S3 bucket construct with organization defaults.

Wraps Bucket and fills in what a caller leaves out:

- S3 managed encryption (KMS when only an encryption key is given)
- versioning on
- all four public access vectors blocked

Lifecycle rules are always the baseline rule followed by the caller's
rules, in the order given. The baseline rule is never dropped, even when
a caller rule overlaps it.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from aws_cdk import Duration, aws_s3 as s3
from constructs import Construct

from ..config import BUCKET_DEFAULTS
from ..logger import create_logger
from ..precedence import apply_precedence, resolution_sources


DEFAULT_BLOCK_PUBLIC_ACCESS = s3.BlockPublicAccess(
    block_public_acls=True,
    block_public_policy=True,
    ignore_public_acls=True,
    restrict_public_buckets=True,
)

# Expire and tier old object versions, clean up failed uploads
BASELINE_LIFECYCLE_RULE = s3.LifecycleRule(
    id='ManageNonCurrentVersions',
    enabled=True,
    noncurrent_version_expiration=Duration.days(BUCKET_DEFAULTS['noncurrent_version_expiration_days']),
    abort_incomplete_multipart_upload_after=Duration.days(BUCKET_DEFAULTS['abort_incomplete_multipart_upload_days']),
    noncurrent_version_transitions=[
        s3.NoncurrentVersionTransition(
            storage_class=s3.StorageClass.INFREQUENT_ACCESS,
            transition_after=Duration.days(BUCKET_DEFAULTS['noncurrent_version_transition_days']),
        ),
    ],
    expired_object_delete_marker=True,
)


def merge_lifecycle_rules(lifecycle_rules: Optional[Sequence[s3.LifecycleRule]] = None) -> List[s3.LifecycleRule]:
    """Baseline rule first, then the caller's rules in order."""
    return [BASELINE_LIFECYCLE_RULE, *(lifecycle_rules or [])]


def split_bucket_props(props: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]:
    """Split a bucket descriptor into its explicit, computed and default tiers."""
    explicit = {key: value for key, value in props.items() if key != 'lifecycle_rules'}

    computed: Dict[str, Any] = {
        'lifecycle_rules': merge_lifecycle_rules(props.get('lifecycle_rules')),
    }
    # A customer key without a scheme can only mean KMS
    if explicit.get('encryption_key') is not None:
        computed['encryption'] = s3.BucketEncryption.KMS

    defaults: Dict[str, Any] = {
        'encryption': s3.BucketEncryption.S3_MANAGED,
        'versioned': BUCKET_DEFAULTS['versioned'],
        'block_public_access': DEFAULT_BLOCK_PUBLIC_ACCESS,
    }
    return explicit, computed, defaults


def resolve_bucket_props(props: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Resolve a bucket descriptor into Bucket keyword arguments.

    Args:
        props: Bucket props as passed to the S3Bucket constructor

    Returns:
        New dict of Bucket props; the input is left untouched.
    """
    return apply_precedence(*split_bucket_props(props))


class S3Bucket(s3.Bucket):
    """
    Bucket with encryption, versioning, public access block and the
    baseline lifecycle rule applied by default.

    Usage:
        S3Bucket(
            self,
            'ReportBucket',
            lifecycle_rules=[s3.LifecycleRule(id='ExpireReports', expiration=Duration.days(365))],
        )
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        """
        Initialize the bucket.

        Args:
            scope: CDK construct scope
            construct_id: Unique construct identifier
            **kwargs: Any Bucket property; lifecycle_rules are appended
                after the baseline rule, everything else passes through
        """
        tiers = split_bucket_props(kwargs)

        super().__init__(scope, construct_id, **apply_precedence(*tiers))

        create_logger(scope, construct_id).log_resolved(
            's3-bucket',
            resolution_sources(*tiers),
            lifecycleRuleCount=len(tiers[1]['lifecycle_rules']),
        )
