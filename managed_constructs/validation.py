"""
Fail-fast validation for managed construct descriptors.

Each validator returns a list of errors; an empty list means the
descriptor is acceptable. Each error is a dict with 'field' and 'message'
keys. The resolvers turn a non-empty list into the matching
ConfigurationError before anything is constructed.
"""

from typing import Any, Dict, List, Optional

from .config import SQS_DEFAULTS


def validate_scaling_props(
    provisioned: bool,
    read_scaling_props: Optional[Any],
    write_scaling_props: Optional[Any],
) -> List[Dict[str, str]]:
    """
    Validate autoscaling hints for a table.

    Provisioned billing needs both read and write hints; on-demand billing
    needs neither.

    Examples:
        >>> validate_scaling_props(False, None, None)
        []

        >>> validate_scaling_props(True, None, object())
        [{'field': 'read_scaling_props', 'message': 'Field is required for provisioned billing mode'}]
    """
    errors: List[Dict[str, str]] = []
    if not provisioned:
        return errors

    if read_scaling_props is None:
        errors.append({
            'field': 'read_scaling_props',
            'message': 'Field is required for provisioned billing mode'
        })
    if write_scaling_props is None:
        errors.append({
            'field': 'write_scaling_props',
            'message': 'Field is required for provisioned billing mode'
        })
    return errors


def validate_fifo_queue_name(queue_name: str) -> List[Dict[str, str]]:
    """
    Validate that a FIFO queue name carries the mandatory suffix.

    Examples:
        >>> validate_fifo_queue_name('orders.fifo')
        []

        >>> validate_fifo_queue_name('orders')
        [{'field': 'queue_name', 'message': 'Fifo queue must have name ending with .fifo suffix. Present queue name : orders'}]
    """
    suffix = SQS_DEFAULTS['fifo_suffix']
    if queue_name.endswith(suffix):
        return []
    return [{
        'field': 'queue_name',
        'message': f'Fifo queue must have name ending with {suffix} suffix. Present queue name : {queue_name}'
    }]


def validate_dead_letter_role(is_dead_letter: bool, enable_dead_letter_queue: Optional[bool]) -> List[Dict[str, str]]:
    """A dead-letter queue must never ask for its own dead-letter queue."""
    if is_dead_letter and enable_dead_letter_queue:
        return [{
            'field': 'enable_dead_letter_queue',
            'message': 'A dead-letter queue cannot have its own dead-letter queue'
        }]
    return []
