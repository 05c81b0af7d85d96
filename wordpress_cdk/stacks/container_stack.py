"""
AWS CDK stack running WordPress on ECS Fargate.

Provisions:
  - VPC (CDK default layout: public + private subnets, NAT)
  - ECS cluster and an HTTPS Application Load Balanced Fargate service
  - Encrypted EFS file system mounted as wp-content
  - RDS MySQL 8.0
  - Secrets Manager: DB password + the eight WordPress keys/salts
  - Route 53 alias records for <name> and www.<name>

The certificate ARN and hosted zone are owned outside this stack and are
passed in through WordpressContainerConfig.
"""

from __future__ import annotations

import dataclasses

from aws_cdk import (
    CfnOutput,
    Duration,
    RemovalPolicy,
    Stack,
)
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_ecs as ecs
from aws_cdk import aws_ecs_patterns as ecs_patterns
from aws_cdk import aws_efs as efs
from aws_cdk import aws_iam as iam
from aws_cdk import aws_rds as rds
from aws_cdk import aws_route53 as route53
from aws_cdk import aws_route53_targets as route53_targets
from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct

from wordpress_cdk.logging_config import get_logger
from wordpress_cdk.stacks.salts import declare_salt_secrets

logger = get_logger(__name__)

WORDPRESS_IMAGE = "wordpress:6.2-apache"
DB_NAME = "wordpress"
DB_USER = "admin"
DB_PORT = 3306
EFS_PORT = 2049
WP_CONTENT_VOLUME = "wp-content"
WP_CONTENT_PATH = "/var/www/html/wp-content"


@dataclasses.dataclass
class WordpressContainerConfig:
    certificate_arn: str
    hosted_zone_id: str
    hosted_zone_name: str
    a_record_name: str


class WordpressContainerStack(Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: WordpressContainerConfig,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # ── VPC + Cluster ─────────────────────────────────────────────────────
        vpc = ec2.Vpc(self, "WordpressVpc")
        cluster = ecs.Cluster(self, "WordpressCluster", vpc=vpc)

        # ── Secrets ───────────────────────────────────────────────────────────
        db_credentials = secretsmanager.Secret(
            self,
            "WordpressDbCredentials",
            generate_secret_string=secretsmanager.SecretStringGenerator(
                password_length=30,
                exclude_punctuation=True,
                include_space=False,
            ),
            removal_policy=RemovalPolicy.DESTROY,
        )
        salt_secrets = declare_salt_secrets(self)

        # ── RDS MySQL 8.0 ─────────────────────────────────────────────────────
        db_sg = ec2.SecurityGroup(
            self,
            "WordpressRdsSecurityGroup",
            vpc=vpc,
            description="Allow MySql Connection",
        )
        db_sg.add_ingress_rule(
            ec2.Peer.ipv4(vpc.vpc_cidr_block),
            ec2.Port.tcp(DB_PORT),
            "Allow MySQL connection",
        )

        db = rds.DatabaseInstance(
            self,
            "WordpressMysqlRdsInstance",
            credentials=rds.Credentials.from_password(
                DB_USER, db_credentials.secret_value
            ),
            vpc=vpc,
            port=DB_PORT,
            database_name=DB_NAME,
            allocated_storage=20,
            instance_identifier="mysql-wordpress",
            engine=rds.DatabaseInstanceEngine.mysql(
                version=rds.MysqlEngineVersion.VER_8_0,
            ),
            instance_type=ec2.InstanceType.of(
                ec2.InstanceClass.T2, ec2.InstanceSize.MICRO
            ),
            security_groups=[db_sg],
        )

        # ── EFS (wp-content) ──────────────────────────────────────────────────
        fs_sg = ec2.SecurityGroup(
            self,
            "WordpressEfsSecurityGroup",
            vpc=vpc,
            description="Allow access to efs",
        )
        fs_sg.add_ingress_rule(
            ec2.Peer.ipv4(vpc.vpc_cidr_block),
            ec2.Port.tcp(EFS_PORT),
            "Allow access to the EFS file mounts",
        )

        file_system = efs.FileSystem(
            self,
            "WordpressContent",
            vpc=vpc,
            encrypted=True,
            security_group=fs_sg,
            removal_policy=RemovalPolicy.DESTROY,
        )

        # ── Task execution role ───────────────────────────────────────────────
        execution_role = iam.Role(
            self,
            "WordpressTaskExecutionRole",
            assumed_by=iam.ServicePrincipal("ecs-tasks.amazonaws.com"),
        )
        execution_role.add_managed_policy(
            iam.ManagedPolicy.from_aws_managed_policy_name(
                "service-role/AmazonECSTaskExecutionRolePolicy"
            )
        )
        db_credentials.grant_read(execution_role)
        for secret in salt_secrets.values():
            secret.grant_read(execution_role)

        task_sg = ec2.SecurityGroup(
            self,
            "WordpressTaskSecurityGroup",
            vpc=vpc,
            description="Allow access to the task",
        )

        # ── Fargate task ──────────────────────────────────────────────────────
        task_definition = ecs.FargateTaskDefinition(
            self,
            "WordpressTaskDefinition",
            family="wordpress",
            execution_role=execution_role,
            memory_limit_mib=512,
            cpu=256,
            volumes=[
                ecs.Volume(
                    name=WP_CONTENT_VOLUME,
                    efs_volume_configuration=ecs.EfsVolumeConfiguration(
                        file_system_id=file_system.file_system_id,
                        transit_encryption="ENABLED",
                    ),
                )
            ],
        )

        container_secrets = {
            "WORDPRESS_DB_PASSWORD": ecs.Secret.from_secrets_manager(db_credentials),
        }
        container_secrets.update(
            {
                env_name: ecs.Secret.from_secrets_manager(secret)
                for env_name, secret in salt_secrets.items()
            }
        )

        container = task_definition.add_container(
            "Wordpress",
            image=ecs.ContainerImage.from_registry(WORDPRESS_IMAGE),
            logging=ecs.LogDrivers.aws_logs(stream_prefix="Wordpress"),
            memory_limit_mib=512,
            cpu=256,
            environment={
                "WORDPRESS_DB_HOST": (
                    f"{db.db_instance_endpoint_address}:{db.db_instance_endpoint_port}"
                ),
                "WORDPRESS_DB_NAME": DB_NAME,
                "WORDPRESS_DB_USER": DB_USER,
            },
            secrets=container_secrets,
        )
        container.add_port_mappings(ecs.PortMapping(container_port=80))
        container.add_mount_points(
            ecs.MountPoint(
                source_volume=WP_CONTENT_VOLUME,
                container_path=WP_CONTENT_PATH,
                read_only=False,
            )
        )

        # ── Load balanced service ─────────────────────────────────────────────
        certificate = acm.Certificate.from_certificate_arn(
            self, "WordpressDomainCertificate", config.certificate_arn
        )

        wordpress = ecs_patterns.ApplicationLoadBalancedFargateService(
            self,
            "WordpressService",
            cluster=cluster,
            task_definition=task_definition,
            certificate=certificate,
            redirect_http=True,
        )
        wordpress.service.connections.add_security_group(task_sg)

        wordpress.service.auto_scale_task_count(min_capacity=1, max_capacity=1)

        wordpress.target_group.configure_health_check(
            enabled=True,
            path="/index.php",
            healthy_http_codes="200,201,301,302",
            interval=Duration.seconds(15),
            timeout=Duration.seconds(10),
            healthy_threshold_count=3,
            unhealthy_threshold_count=2,
        )

        # ── Route 53 ──────────────────────────────────────────────────────────
        public_zone = route53.HostedZone.from_hosted_zone_attributes(
            self,
            "WordpressHostedZone",
            zone_name=config.hosted_zone_name,
            hosted_zone_id=config.hosted_zone_id,
        )

        for record_id, record_name in (
            ("WordpressARecord", config.a_record_name),
            ("WordpressWWWARecord", f"www.{config.a_record_name}"),
        ):
            route53.ARecord(
                self,
                record_id,
                zone=public_zone,
                record_name=record_name,
                target=route53.RecordTarget.from_alias(
                    route53_targets.LoadBalancerTarget(wordpress.load_balancer)
                ),
            )

        # ── Stack outputs ─────────────────────────────────────────────────────
        CfnOutput(
            self,
            "LoadBalancerDnsName",
            value=wordpress.load_balancer.load_balancer_dns_name,
            description="ALB DNS name",
        )
        CfnOutput(
            self,
            "DbEndpoint",
            value=db.db_instance_endpoint_address,
            description="RDS endpoint",
        )

        self.vpc = vpc
        self.service = wordpress
        self.db_sg = db_sg
        self.database = db
        self.execution_role = execution_role
        self.secrets = {"WORDPRESS_DB_PASSWORD": db_credentials, **salt_secrets}

        logger.info(
            "stack_declared",
            stack=construct_id,
            kind="container",
            secrets=1 + len(salt_secrets),
        )
