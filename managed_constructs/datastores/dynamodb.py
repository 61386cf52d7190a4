"""
DynamoDB table construct with organization defaults.

Wraps TableV2 and fills in the data-protection properties a caller leaves
out:

- deletion protection on
- point-in-time recovery on
- AWS managed key encryption

Provisioned billing is accepted only together with read and write
autoscaling hints; the table is then billed with autoscaled capacity
instead of a guessed fixed capacity.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from aws_cdk import aws_dynamodb as dynamodb
from constructs import Construct

from ..config import TABLE_DEFAULTS
from ..errors import MissingRequiredPropertyError
from ..logger import create_logger
from ..precedence import apply_precedence, resolution_sources
from ..validation import validate_scaling_props


DEFAULT_TABLE_ENCRYPTION = dynamodb.TableEncryptionV2.aws_managed_key()
ON_DEMAND_BILLING = dynamodb.Billing.on_demand()

# Keyword arguments consumed here and never forwarded to TableV2
_EXTENSION_KEYS = ('read_scaling_props', 'write_scaling_props', 'billing_mode')


def is_provisioned(billing: Optional[dynamodb.Billing], billing_mode: Optional[dynamodb.BillingMode]) -> bool:
    """Whether the descriptor asks for provisioned capacity."""
    if billing is not None:
        return billing.mode == dynamodb.BillingMode.PROVISIONED
    return billing_mode == dynamodb.BillingMode.PROVISIONED


def autoscaled_billing(
    read_scaling_props: dynamodb.EnableScalingProps,
    write_scaling_props: dynamodb.EnableScalingProps,
) -> dynamodb.Billing:
    """Build provisioned billing with autoscaled read and write capacity."""
    target = TABLE_DEFAULTS['target_utilization_percent']
    return dynamodb.Billing.provisioned(
        read_capacity=dynamodb.Capacity.autoscaled(
            min_capacity=read_scaling_props.min_capacity,
            max_capacity=read_scaling_props.max_capacity,
            target_utilization_percent=target,
        ),
        write_capacity=dynamodb.Capacity.autoscaled(
            min_capacity=write_scaling_props.min_capacity,
            max_capacity=write_scaling_props.max_capacity,
            target_utilization_percent=target,
        ),
    )


def split_table_props(props: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]:
    """
    Split a table descriptor into its explicit, computed and default tiers.

    Raises:
        MissingRequiredPropertyError: provisioned billing without both
            scaling hints
    """
    explicit = {key: value for key, value in props.items() if key not in _EXTENSION_KEYS}
    read_scaling_props = props.get('read_scaling_props')
    write_scaling_props = props.get('write_scaling_props')
    billing_mode = props.get('billing_mode')

    provisioned = is_provisioned(explicit.get('billing'), billing_mode)
    errors = validate_scaling_props(provisioned, read_scaling_props, write_scaling_props)
    if errors:
        missing = [error['field'] for error in errors]
        raise MissingRequiredPropertyError(
            f"missing scaling properties: {', '.join(missing)} required for provisioned billing mode",
            missing,
        )

    computed: Dict[str, Any] = {}
    if provisioned:
        computed['billing'] = autoscaled_billing(read_scaling_props, write_scaling_props)
    elif billing_mode == dynamodb.BillingMode.PAY_PER_REQUEST:
        computed['billing'] = ON_DEMAND_BILLING

    defaults: Dict[str, Any] = {
        'deletion_protection': TABLE_DEFAULTS['deletion_protection'],
        'encryption': DEFAULT_TABLE_ENCRYPTION,
    }
    # TableV2 rejects the flag and the specification together
    if explicit.get('point_in_time_recovery_specification') is None:
        defaults['point_in_time_recovery'] = TABLE_DEFAULTS['point_in_time_recovery']

    return explicit, computed, defaults


def resolve_table_props(props: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Resolve a table descriptor into TableV2 keyword arguments.

    Args:
        props: TableV2 props plus read_scaling_props, write_scaling_props
            and billing_mode

    Returns:
        New dict of TableV2 props; the input is left untouched.

    Raises:
        MissingRequiredPropertyError: provisioned billing without both
            scaling hints
    """
    return apply_precedence(*split_table_props(props))


class DynamoDBTable(dynamodb.TableV2):
    """
    TableV2 with deletion protection, point-in-time recovery and
    encryption on by default.

    Usage:
        DynamoDBTable(
            self,
            'TenantTable',
            partition_key=dynamodb.Attribute(name='id', type=dynamodb.AttributeType.STRING),
            billing=dynamodb.Billing.provisioned(...),
            read_scaling_props=dynamodb.EnableScalingProps(min_capacity=1, max_capacity=10),
            write_scaling_props=dynamodb.EnableScalingProps(min_capacity=1, max_capacity=5),
        )
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        read_scaling_props: Optional[dynamodb.EnableScalingProps] = None,
        write_scaling_props: Optional[dynamodb.EnableScalingProps] = None,
        billing_mode: Optional[dynamodb.BillingMode] = None,
        **kwargs
    ) -> None:
        """
        Initialize the table.

        Args:
            scope: CDK construct scope
            construct_id: Unique construct identifier
            read_scaling_props: Read capacity bounds, required for provisioned billing
            write_scaling_props: Write capacity bounds, required for provisioned billing
            billing_mode: Shorthand for billing when no Billing object is passed
            **kwargs: Any other TableV2 property, passed through unchanged
        """
        tiers = split_table_props({
            **kwargs,
            'read_scaling_props': read_scaling_props,
            'write_scaling_props': write_scaling_props,
            'billing_mode': billing_mode,
        })

        super().__init__(scope, construct_id, **apply_precedence(*tiers))

        create_logger(scope, construct_id).log_resolved(
            'dynamodb-table',
            resolution_sources(*tiers),
        )
