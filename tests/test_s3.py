"""
Unit tests for the managed S3 bucket construct.
"""

from aws_cdk import App, Duration, Stack, aws_kms as kms, aws_s3 as s3
from aws_cdk.assertions import Match, Template

from managed_constructs.datastores import S3Bucket, resolve_bucket_props, BASELINE_LIFECYCLE_RULE
from managed_constructs.datastores.s3 import DEFAULT_BLOCK_PUBLIC_ACCESS, merge_lifecycle_rules


def _stack():
    return Stack(App(), 'TestStack')


class TestBucketDefaults:
    """Test library defaults for buckets."""

    def test_defaults_when_unspecified(self):
        """Test encryption, versioning, public access block and baseline rule."""
        resolved = resolve_bucket_props({})

        assert resolved['encryption'] == s3.BucketEncryption.S3_MANAGED
        assert resolved['versioned'] is True
        assert resolved['block_public_access'] is DEFAULT_BLOCK_PUBLIC_ACCESS
        assert resolved['lifecycle_rules'] == [BASELINE_LIFECYCLE_RULE]

    def test_explicit_values_win(self):
        """Test explicit caller values override every default."""
        block = s3.BlockPublicAccess.BLOCK_ACLS
        resolved = resolve_bucket_props({
            'encryption': s3.BucketEncryption.KMS_MANAGED,
            'versioned': False,
            'block_public_access': block,
            'bucket_name': 'reports',
        })

        assert resolved['encryption'] == s3.BucketEncryption.KMS_MANAGED
        assert resolved['versioned'] is False
        assert resolved['block_public_access'] is block
        assert resolved['bucket_name'] == 'reports'

    def test_encryption_key_computes_kms(self):
        """Test a key without a scheme resolves to KMS encryption."""
        key = kms.Key(_stack(), 'Key')
        resolved = resolve_bucket_props({'encryption_key': key})

        assert resolved['encryption'] == s3.BucketEncryption.KMS
        assert resolved['encryption_key'] is key

    def test_explicit_encryption_wins_over_computed(self):
        """Test an explicit scheme is kept even with a key present."""
        key = kms.Key(_stack(), 'Key')
        resolved = resolve_bucket_props({
            'encryption_key': key,
            'encryption': s3.BucketEncryption.S3_MANAGED,
        })

        assert resolved['encryption'] == s3.BucketEncryption.S3_MANAGED

    def test_resolution_is_idempotent(self):
        """Test identical descriptors resolve to equal results."""
        rule = s3.LifecycleRule(id='Expire', expiration=Duration.days(30))
        props = {'lifecycle_rules': [rule]}
        assert resolve_bucket_props(props) == resolve_bucket_props(props)


class TestLifecycleRules:
    """Test baseline and caller lifecycle rule merging."""

    def test_baseline_first_then_caller_rules_in_order(self):
        """Test caller rules follow the baseline rule in the order given."""
        first = s3.LifecycleRule(id='First', expiration=Duration.days(30))
        second = s3.LifecycleRule(id='Second', expiration=Duration.days(60))

        resolved = resolve_bucket_props({'lifecycle_rules': [first, second]})

        assert resolved['lifecycle_rules'] == [BASELINE_LIFECYCLE_RULE, first, second]

    def test_overlapping_caller_rule_does_not_replace_baseline(self):
        """Test a caller rule with the same settings is appended, not merged."""
        overlapping = s3.LifecycleRule(
            id='ManageNonCurrentVersions',
            noncurrent_version_expiration=Duration.days(10),
        )
        resolved = resolve_bucket_props({'lifecycle_rules': [overlapping]})

        assert len(resolved['lifecycle_rules']) == 2
        assert resolved['lifecycle_rules'][0] is BASELINE_LIFECYCLE_RULE
        assert resolved['lifecycle_rules'][1] is overlapping

    def test_caller_rule_list_is_not_mutated(self):
        """Test the caller's list is copied, not extended in place."""
        rules = [s3.LifecycleRule(id='Only', expiration=Duration.days(30))]
        resolve_bucket_props({'lifecycle_rules': rules})
        assert len(rules) == 1

    def test_empty_rule_list(self):
        """Test an explicit empty list still gets the baseline rule."""
        assert resolve_bucket_props({'lifecycle_rules': []})['lifecycle_rules'] == [BASELINE_LIFECYCLE_RULE]

    def test_merge_accepts_any_sequence(self):
        """Test a tuple of caller rules is merged into a new list."""
        rule = s3.LifecycleRule(id='Only', expiration=Duration.days(30))
        merged = merge_lifecycle_rules((rule,))

        assert merged == [BASELINE_LIFECYCLE_RULE, rule]
        assert merge_lifecycle_rules() == [BASELINE_LIFECYCLE_RULE]


class TestBucketTemplate:
    """Test the synthesized bucket resource."""

    def test_default_bucket_template(self):
        """Test defaults land in the CloudFormation template."""
        stack = _stack()
        S3Bucket(stack, 'Bucket')

        template = Template.from_stack(stack)
        template.has_resource_properties('AWS::S3::Bucket', {
            'BucketEncryption': {
                'ServerSideEncryptionConfiguration': [
                    Match.object_like({
                        'ServerSideEncryptionByDefault': {'SSEAlgorithm': 'AES256'},
                    }),
                ],
            },
            'VersioningConfiguration': {'Status': 'Enabled'},
            'PublicAccessBlockConfiguration': {
                'BlockPublicAcls': True,
                'BlockPublicPolicy': True,
                'IgnorePublicAcls': True,
                'RestrictPublicBuckets': True,
            },
            'LifecycleConfiguration': {
                'Rules': [
                    Match.object_like({
                        'Id': 'ManageNonCurrentVersions',
                        'Status': 'Enabled',
                        'NoncurrentVersionExpiration': Match.object_like({'NoncurrentDays': 90}),
                        'AbortIncompleteMultipartUpload': {'DaysAfterInitiation': 7},
                        'NoncurrentVersionTransitions': [
                            Match.object_like({
                                'StorageClass': 'STANDARD_IA',
                                'TransitionInDays': 30,
                            }),
                        ],
                        'ExpiredObjectDeleteMarker': True,
                    }),
                ],
            },
        })

    def test_caller_rules_follow_baseline_in_template(self):
        """Test rule order survives synthesis."""
        stack = _stack()
        S3Bucket(
            stack,
            'Bucket',
            lifecycle_rules=[s3.LifecycleRule(id='ExpireReports', expiration=Duration.days(365))],
        )

        Template.from_stack(stack).has_resource_properties('AWS::S3::Bucket', {
            'LifecycleConfiguration': {
                'Rules': [
                    Match.object_like({'Id': 'ManageNonCurrentVersions'}),
                    Match.object_like({'Id': 'ExpireReports', 'ExpirationInDays': 365}),
                ],
            },
        })
