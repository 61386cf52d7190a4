"""
Organization-wide policy constants for the managed constructs.

Every value here is a library default: it only applies when the caller
leaves the matching property unspecified.
"""

from aws_cdk import Duration


# CDK context key that turns on structured synth-time logging
LOGGING_CONTEXT_KEY = 'managed-constructs:logging'

TABLE_DEFAULTS = {
    'deletion_protection': True,
    'point_in_time_recovery': True,
    'target_utilization_percent': 60,
}

BUCKET_DEFAULTS = {
    'versioned': True,
    'noncurrent_version_expiration_days': 90,
    'abort_incomplete_multipart_upload_days': 7,
    'noncurrent_version_transition_days': 30,
}

SQS_DEFAULTS = {
    'max_retention_period': Duration.days(14),
    'default_receive_count': 3,
    'max_queue_name_length': 80,
    'fifo_suffix': '.fifo',
    'dead_letter_suffix': '-dlq',
}
