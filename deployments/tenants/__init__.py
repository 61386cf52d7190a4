"""Tenant Service CDK stacks."""

from .stateful_stack import TenantStatefulStack

__all__ = [
    "TenantStatefulStack",
]
