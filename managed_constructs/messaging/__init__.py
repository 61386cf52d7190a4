"""Managed messaging constructs."""

from .sqs import SQSQueue, QueueRole, QueueResolution, resolve_queue_props

__all__ = [
    "SQSQueue",
    "QueueRole",
    "QueueResolution",
    "resolve_queue_props",
]
