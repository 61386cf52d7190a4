"""
Structured synth-time logging for the managed constructs.

Writes one JSON object per line so resolution decisions can be traced in
`cdk synth` output. Logging is off unless the app sets the CDK context
key `managed-constructs:logging` to true, for example:

    cdk synth -c managed-constructs:logging=true

The pure resolvers never log; only the construct classes do.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict

from constructs import Construct

from .config import LOGGING_CONTEXT_KEY


class StructuredLogger:
    """
    Structured logger bound to one construct path.

    Usage:
        logger = create_logger(scope, 'OrdersQueue')
        logger.log_resolved('sqs-queue', sources={'encryption': 'default'})
    """

    def __init__(self, construct_path: str, enabled: bool = True):
        """
        Initialize the structured logger.

        Args:
            construct_path: Path of the construct being declared
            enabled: Whether entries are written at all
        """
        self.construct_path = construct_path
        self.enabled = enabled

    def _log(self, event: str, **kwargs: Any) -> None:
        """
        Internal method to write structured log entry.

        Args:
            event: Event type/name
            **kwargs: Additional fields to include in log entry
        """
        if not self.enabled:
            return

        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'constructPath': self.construct_path,
            'event': event,
            **kwargs
        }

        print(json.dumps(log_entry, default=str))

    def log_resolved(self, resource_type: str, sources: Dict[str, str], **additional_fields: Any) -> None:
        """
        Log which precedence tier each resolved property came from.

        Args:
            resource_type: Kind of resource (e.g. 'dynamodb-table')
            sources: Property name -> 'explicit' | 'computed' | 'default'
            **additional_fields: Additional fields to include in log
        """
        self._log(
            'resource_resolved',
            resourceType=resource_type,
            sources=sources,
            **additional_fields
        )

    def log_info(self, message: str, **additional_fields: Any) -> None:
        """
        Log informational event.

        Example:
            logger.log_info('dead_letter_name_discarded', derivedLength=84)
        """
        self._log(
            'info',
            message=message,
            **additional_fields
        )


def logging_enabled(scope: Construct) -> bool:
    """Read the logging switch from the CDK context of the scope."""
    value = scope.node.try_get_context(LOGGING_CONTEXT_KEY)
    if isinstance(value, str):
        return value.strip().lower() == 'true'
    return bool(value)


def create_logger(scope: Construct, construct_id: str) -> StructuredLogger:
    """
    Create a structured logger for a construct about to be added to scope.

    Args:
        scope: Parent construct
        construct_id: Identifier of the construct being declared

    Returns:
        StructuredLogger instance, disabled unless the context switch is set
    """
    parent_path = scope.node.path
    construct_path = f'{parent_path}/{construct_id}' if parent_path else construct_id
    return StructuredLogger(construct_path, enabled=logging_enabled(scope))
