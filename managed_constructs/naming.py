"""
Dead-letter queue name derivation.

Standard queues get a '-dlq' suffix. FIFO queues must keep '.fifo' as the
final suffix, so '-dlq' is spliced in front of the last '.fifo':

    orders       -> orders-dlq
    orders.fifo  -> orders-dlq.fifo

A derived name longer than the SQS limit is dropped rather than
truncated; the dead-letter queue is then created with a generated name.
"""

from typing import Optional

from .config import SQS_DEFAULTS
from .errors import InvalidNameFormatError
from .validation import validate_fifo_queue_name


def fifo_dead_letter_name(queue_name: str) -> str:
    """
    Splice the dead-letter suffix in front of the last '.fifo'.

    Raises:
        InvalidNameFormatError: the name does not end with '.fifo'
    """
    errors = validate_fifo_queue_name(queue_name)
    if errors:
        raise InvalidNameFormatError(errors[0]['message'], queue_name)

    suffix_index = queue_name.rindex(SQS_DEFAULTS['fifo_suffix'])
    return f"{queue_name[:suffix_index]}{SQS_DEFAULTS['dead_letter_suffix']}{queue_name[suffix_index:]}"


def derive_dead_letter_name(primary_name: Optional[str], is_fifo: bool) -> Optional[str]:
    """
    Derive the dead-letter queue name for a primary queue.

    Args:
        primary_name: Explicit name of the primary queue, if any
        is_fifo: Whether the primary queue is a FIFO queue

    Returns:
        The derived name, or None when there is no primary name or the
        result would exceed the maximum queue name length.

    Raises:
        InvalidNameFormatError: is_fifo is set and the name lacks '.fifo'

    Examples:
        >>> derive_dead_letter_name('emails', False)
        'emails-dlq'

        >>> derive_dead_letter_name('emails.fifo', True)
        'emails-dlq.fifo'

        >>> derive_dead_letter_name(None, True) is None
        True
    """
    if not primary_name:
        return None

    if is_fifo:
        derived = fifo_dead_letter_name(primary_name)
    else:
        derived = f"{primary_name}{SQS_DEFAULTS['dead_letter_suffix']}"

    if len(derived) > SQS_DEFAULTS['max_queue_name_length']:
        return None
    return derived
