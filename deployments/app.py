#!/usr/bin/env python3
"""
CDK Application Entry Point.

Creates the Tenant Service stateful stack from the managed constructs.

Usage:
    # Synthesize CloudFormation templates
    cdk synth

    # Synthesize with structured resolution logging
    cdk synth -c managed-constructs:logging=true

    # Deploy a named environment
    cdk deploy -c env_name=prod tenants-prod-stateful-stack

Environment Configuration:
    Stacks can be configured with AWS account and region via environment variables:
    - CDK_DEFAULT_ACCOUNT: AWS account ID
    - CDK_DEFAULT_REGION: AWS region
"""

import os
from aws_cdk import App, Environment

from tenants.stateful_stack import TenantStatefulStack


app = App()

account = os.environ.get('CDK_DEFAULT_ACCOUNT')
region = os.environ.get('CDK_DEFAULT_REGION')

env = None
if account and region:
    env = Environment(account=account, region=region)

env_name = app.node.try_get_context('env_name') or 'dev'

TenantStatefulStack(
    app,
    f'tenants-{env_name}-stateful-stack',
    env_name=env_name,
    env=env,
    description=f'Tenant Service - Stateful resources ({env_name})',
)

app.synth()
