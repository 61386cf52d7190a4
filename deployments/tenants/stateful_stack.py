"""
Tenant Service stateful CDK stack.

Declares the long-lived resources of the Tenant Service with the managed
constructs, so every resource picks up the organization defaults:

- Tenant table (deletion protection, point-in-time recovery, encryption)
- Create/update/delete tenant queues, each with a dead-letter queue
- Ordered tenant events FIFO queue with a KMS key and dead-letter queue
- Tenant report bucket (versioned, private, baseline lifecycle rule)

Stack naming convention: tenants-<env>-stateful-stack

Usage Example:
    from aws_cdk import App
    from tenants.stateful_stack import TenantStatefulStack

    app = App()
    TenantStatefulStack(app, 'tenants-dev-stateful-stack', env_name='dev')
    app.synth()
"""

from aws_cdk import (
    aws_dynamodb as dynamodb,
    aws_s3 as s3,
    aws_sqs as sqs,
    Stack,
    CfnOutput,
    Duration,
    RemovalPolicy,
    Tags,
)
from constructs import Construct

from managed_constructs.datastores import DynamoDBTable, S3Bucket
from managed_constructs.messaging import SQSQueue


class TenantStatefulStack(Stack):
    """
    Stateful resources for the Tenant Service.

    Attributes:
        tenant_table: Tenant DynamoDB table
        create_tenant_queue: Queue of tenant creation requests
        update_tenant_queue: Queue of tenant update requests
        delete_tenant_queue: Queue of tenant deletion requests
        tenant_events_queue: Ordered tenant lifecycle events (FIFO)
        report_bucket: Bucket for tenant reports
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        env_name: str = 'dev',
        **kwargs
    ) -> None:
        """
        Initialize Tenant stateful stack.

        Args:
            scope: CDK app scope
            construct_id: Stack identifier
            env_name: Environment name (dev, staging, prod, etc.)
            **kwargs: Additional stack properties (env, description, etc.)
        """
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = env_name

        Tags.of(self).add('Service', 'tenant-service')
        Tags.of(self).add('Environment', env_name)
        Tags.of(self).add('ManagedBy', 'CDK')

        # Only dev resources may be destroyed with the stack
        removal_policy = RemovalPolicy.DESTROY if env_name == 'dev' else RemovalPolicy.RETAIN

        # 1. Tenant table
        self.tenant_table = DynamoDBTable(
            self,
            'TenantTable',
            partition_key=dynamodb.Attribute(
                name='id',
                type=dynamodb.AttributeType.STRING
            ),
            deletion_protection=env_name != 'dev',
            removal_policy=removal_policy,
        )

        # 2. Tenant lifecycle request queues
        self.create_tenant_queue = SQSQueue(
            self,
            'CreateTenantQueue',
            encryption=sqs.QueueEncryption.SQS_MANAGED,
            enable_dead_letter_queue=True,
        )
        self.update_tenant_queue = SQSQueue(
            self,
            'UpdateTenantQueue',
            encryption=sqs.QueueEncryption.SQS_MANAGED,
            enable_dead_letter_queue=True,
        )
        self.delete_tenant_queue = SQSQueue(
            self,
            'DeleteTenantQueue',
            encryption=sqs.QueueEncryption.SQS_MANAGED,
            enable_dead_letter_queue=True,
        )

        # 3. Ordered tenant events, named so the DLQ name is deterministic
        self.tenant_events_queue = SQSQueue(
            self,
            'TenantEventsQueue',
            queue_name=f'tenants-{env_name}-events.fifo',
            fifo=True,
            encryption=sqs.QueueEncryption.KMS,
            visibility_timeout=Duration.seconds(60),
            enable_dead_letter_queue=True,
            dead_letter_queue_max_receive_count=5,
        )

        # 4. Tenant reports
        self.report_bucket = S3Bucket(
            self,
            'ReportBucket',
            removal_policy=removal_policy,
            auto_delete_objects=env_name == 'dev',
            lifecycle_rules=[
                s3.LifecycleRule(
                    id='ExpireReports',
                    expiration=Duration.days(365),
                ),
            ],
        )

        CfnOutput(
            self,
            'TenantTableName',
            value=self.tenant_table.table_name,
            description='Tenant DynamoDB table name',
            export_name=f'{construct_id}-tenant-table',
        )

        CfnOutput(
            self,
            'TenantEventsQueueUrl',
            value=self.tenant_events_queue.queue_url,
            description='Tenant events FIFO queue URL',
            export_name=f'{construct_id}-tenant-events-queue',
        )

        CfnOutput(
            self,
            'ReportBucketName',
            value=self.report_bucket.bucket_name,
            description='Tenant report bucket name',
            export_name=f'{construct_id}-report-bucket',
        )
