"""
SQS queue construct with organization defaults and a managed dead-letter queue.

Resolution, highest precedence first:

- encryption: explicit scheme, KMS when only a master key is given,
  otherwise SQS managed. KMS without a key gets a dedicated rotating key.
- retention: explicit period, otherwise the SQS maximum of 14 days.
- dead-letter queue: a supplied DeadLetterQueue is used as-is. Otherwise,
  when enable_dead_letter_queue is set, a second SQSQueue is built in the
  DEAD_LETTER role with a name derived from the primary name.

Every queue, dead-letter queues included, denies all actions over
connections without TLS. That statement is not configurable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from aws_cdk import Token, aws_iam as iam, aws_kms as kms, aws_sqs as sqs
from constructs import Construct

from ..config import SQS_DEFAULTS
from ..errors import ConfigurationError
from ..logger import create_logger
from ..naming import derive_dead_letter_name
from ..precedence import apply_precedence, resolution_sources
from ..validation import validate_dead_letter_role


# Keyword arguments consumed here and never forwarded to Queue
_EXTENSION_KEYS = ('enable_dead_letter_queue', 'dead_letter_queue_max_receive_count')


class QueueRole(Enum):
    """
    Role of a queue in a primary/dead-letter pair.

    Only PRIMARY queues may provision a dead-letter queue, which bounds
    the recursion at one level.
    """
    PRIMARY = 'primary'
    DEAD_LETTER = 'dead-letter'


@dataclass(frozen=True)
class QueueResolution:
    """
    Outcome of resolving a queue descriptor.

    Attributes:
        props: Resolved Queue props, without a dead-letter queue that is
            still to be provisioned
        role: Role the queue is declared in
        create_encryption_key: Whether a dedicated KMS key must be created
        provision_dead_letter_queue: Whether a dead-letter queue must be built
        dead_letter_queue_name: Derived name, or the supplied queue's name
        dead_letter_name_discarded: The derived name was over the length limit
        max_receive_count: Receives before a message moves to the dead-letter queue
        sources: Precedence tier each resolved property came from
    """
    props: Dict[str, Any]
    role: QueueRole
    create_encryption_key: bool
    provision_dead_letter_queue: bool
    dead_letter_queue_name: Optional[str]
    dead_letter_name_discarded: bool
    max_receive_count: int
    sources: Dict[str, str] = field(default_factory=dict)


def _is_concrete(name: Optional[str]) -> bool:
    return bool(name) and not Token.is_unresolved(name)


def resolve_queue_props(props: Mapping[str, Any], role: QueueRole = QueueRole.PRIMARY) -> QueueResolution:
    """
    Resolve a queue descriptor without constructing anything.

    Args:
        props: Queue props plus enable_dead_letter_queue and
            dead_letter_queue_max_receive_count
        role: Role the queue is being declared in

    Returns:
        QueueResolution describing the queue and its dependents

    Raises:
        ConfigurationError: a DEAD_LETTER queue asks for its own dead-letter queue
        InvalidNameFormatError: a FIFO queue name lacks the '.fifo' suffix
    """
    explicit = {key: value for key, value in props.items() if key not in _EXTENSION_KEYS}
    enable_dead_letter_queue = props.get('enable_dead_letter_queue')

    errors = validate_dead_letter_role(role is QueueRole.DEAD_LETTER, enable_dead_letter_queue)
    if errors:
        raise ConfigurationError('INVALID_QUEUE_ROLE', errors[0]['message'], {'field': errors[0]['field']})

    queue_name = explicit.get('queue_name')
    supplied_dead_letter_queue = explicit.get('dead_letter_queue')

    computed: Dict[str, Any] = {}
    if explicit.get('fifo') is None and _is_concrete(queue_name) and queue_name.endswith(SQS_DEFAULTS['fifo_suffix']):
        computed['fifo'] = True
    if explicit.get('encryption_master_key') is not None:
        computed['encryption'] = sqs.QueueEncryption.KMS

    defaults = {
        'encryption': sqs.QueueEncryption.SQS_MANAGED,
        'retention_period': SQS_DEFAULTS['max_retention_period'],
    }
    resolved = apply_precedence(explicit, computed, defaults)
    is_fifo = bool(resolved.get('fifo'))

    dead_letter_queue_name = None
    name_discarded = False
    if supplied_dead_letter_queue is not None:
        dead_letter_queue_name = supplied_dead_letter_queue.queue.queue_name
    elif role is QueueRole.PRIMARY and _is_concrete(queue_name):
        dead_letter_queue_name = derive_dead_letter_name(queue_name, is_fifo)
        name_discarded = dead_letter_queue_name is None

    max_receive_count = props.get('dead_letter_queue_max_receive_count')
    if not max_receive_count:
        max_receive_count = SQS_DEFAULTS['default_receive_count']

    return QueueResolution(
        props=resolved,
        role=role,
        create_encryption_key=(
            resolved['encryption'] == sqs.QueueEncryption.KMS
            and resolved.get('encryption_master_key') is None
        ),
        provision_dead_letter_queue=bool(enable_dead_letter_queue) and supplied_dead_letter_queue is None,
        dead_letter_queue_name=dead_letter_queue_name,
        dead_letter_name_discarded=name_discarded,
        max_receive_count=max_receive_count,
        sources=resolution_sources(explicit, computed, defaults),
    )


class SQSQueue(sqs.Queue):
    """
    Queue with encryption, maximum retention, TLS-only access and an
    optional managed dead-letter queue.

    Usage:
        SQSQueue(
            self,
            'EmailsQueue',
            queue_name='emails.fifo',
            fifo=True,
            enable_dead_letter_queue=True,
        )
        # -> EmailsQueue (emails.fifo) and EmailsQueueDLQ (emails-dlq.fifo)

    Attributes:
        role: PRIMARY or DEAD_LETTER
        dead_letter_queue_name: Name of the dead-letter queue, when there is one
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        enable_dead_letter_queue: Optional[bool] = None,
        dead_letter_queue_max_receive_count: Optional[int] = None,
        role: QueueRole = QueueRole.PRIMARY,
        **kwargs
    ) -> None:
        """
        Initialize the queue and any dependents.

        Args:
            scope: CDK construct scope
            construct_id: Unique construct identifier
            enable_dead_letter_queue: Build a dead-letter queue alongside this one
            dead_letter_queue_max_receive_count: Receives before dead-lettering (default 3)
            role: Role this queue is declared in
            **kwargs: Any other Queue property, passed through unchanged
        """
        # 1. Resolve and validate everything before touching the construct tree
        resolution = resolve_queue_props(
            {
                **kwargs,
                'enable_dead_letter_queue': enable_dead_letter_queue,
                'dead_letter_queue_max_receive_count': dead_letter_queue_max_receive_count,
            },
            role=role,
        )
        logger = create_logger(scope, construct_id)
        props = dict(resolution.props)

        # 2. Dedicated rotating key for KMS encryption without a supplied key
        if resolution.create_encryption_key:
            props['encryption_master_key'] = kms.Key(
                scope,
                f'{construct_id}Key',
                description=f'Key for {construct_id} queue',
                enable_key_rotation=True,
            )
            logger.log_info('encryption_key_created', keyId=f'{construct_id}Key')

        if resolution.dead_letter_name_discarded:
            logger.log_info(
                'dead_letter_name_discarded',
                maxLength=SQS_DEFAULTS['max_queue_name_length'],
            )

        # 3. Dead-letter queue, same class, one level deep
        if resolution.provision_dead_letter_queue:
            props['dead_letter_queue'] = sqs.DeadLetterQueue(
                queue=SQSQueue(
                    scope,
                    f'{construct_id}DLQ',
                    queue_name=resolution.dead_letter_queue_name,
                    encryption=props['encryption'],
                    encryption_master_key=props.get('encryption_master_key'),
                    enable_dead_letter_queue=False,
                    retention_period=SQS_DEFAULTS['max_retention_period'],
                    fifo=props.get('fifo'),
                    role=QueueRole.DEAD_LETTER,
                ),
                max_receive_count=resolution.max_receive_count,
            )

        # 4. The queue itself
        super().__init__(scope, construct_id, **props)

        self.role = role
        self.dead_letter_queue_name = (
            resolution.dead_letter_queue_name if 'dead_letter_queue' in props else None
        )

        # 5. TLS-only access, always
        self.add_to_resource_policy(iam.PolicyStatement(
            sid='DenyInsecureTransport',
            effect=iam.Effect.DENY,
            actions=['sqs:*'],
            principals=[iam.AnyPrincipal()],
            resources=[self.queue_arn],
            conditions={
                'Bool': {
                    'aws:SecureTransport': 'false',
                },
            },
        ))

        logger.log_resolved(
            'sqs-queue',
            resolution.sources,
            role=role.value,
            deadLetterQueue=resolution.dead_letter_queue_name,
        )
