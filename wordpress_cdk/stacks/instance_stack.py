"""
AWS CDK stack running WordPress on a single EC2 host.

Provisions:
  - VPC with public / isolated subnets and no NAT gateway
  - EC2 instance (Amazon Linux 2023) in the public subnet, reachable over SSH
  - Key pair generated by EC2, private key kept in SSM Parameter Store
  - Bootstrap script shipped as an S3 asset and executed once at first boot
  - RDS MySQL 8.0 in the isolated subnets, reachable only from the instance
  - Secrets Manager: generated DB credentials

Operator outputs: public IP, private key download command, SSH command.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

from aws_cdk import (
    CfnOutput,
    RemovalPolicy,
    Stack,
)
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_iam as iam
from aws_cdk import aws_rds as rds
from aws_cdk import aws_s3_assets as s3_assets
from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct

from wordpress_cdk.logging_config import get_logger

logger = get_logger(__name__)

DB_NAME = "wordpress"
DB_USER = "admin"
DB_PORT = 3306
SSH_USER = "ec2-user"
KEY_FILE = "wordpress-key.pem"

# Shipped as package data, see [tool.setuptools.package-data]
DEFAULT_BOOTSTRAP_SCRIPT = Path(__file__).resolve().parents[1] / "assets" / "bootstrap.sh"


@dataclasses.dataclass
class WordpressInstanceConfig:
    instance_type: str = "t3.micro"
    db_instance_type: str = "t3.micro"
    ssh_cidr: str = "0.0.0.0/0"
    db_allocated_storage: int = 20
    bootstrap_script: Path = DEFAULT_BOOTSTRAP_SCRIPT


class WordpressInstanceStack(Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: WordpressInstanceConfig,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # ── VPC ───────────────────────────────────────────────────────────────
        vpc = ec2.Vpc(
            self,
            "Vpc",
            max_azs=2,
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name="Public",
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=24,
                ),
                ec2.SubnetConfiguration(
                    name="Isolated",
                    subnet_type=ec2.SubnetType.PRIVATE_ISOLATED,
                    cidr_mask=28,
                ),
            ],
        )

        # ── Security Groups ────────────────────────────────────────────────────
        instance_sg = ec2.SecurityGroup(
            self,
            "InstanceSg",
            vpc=vpc,
            description="WordPress host",
            allow_all_outbound=True,
        )
        instance_sg.add_ingress_rule(
            ec2.Peer.ipv4(config.ssh_cidr), ec2.Port.tcp(22), "SSH from operator"
        )
        instance_sg.add_ingress_rule(ec2.Peer.any_ipv4(), ec2.Port.tcp(80), "HTTP inbound")

        db_sg = ec2.SecurityGroup(
            self,
            "DbSg",
            vpc=vpc,
            description="WordPress MySQL",
            allow_all_outbound=False,
        )
        db_sg.add_ingress_rule(instance_sg, ec2.Port.tcp(DB_PORT), "MySQL from WordPress host")

        # ── Instance ──────────────────────────────────────────────────────────
        key_pair = ec2.KeyPair(self, "KeyPair")

        role = iam.Role(
            self,
            "InstanceRole",
            assumed_by=iam.ServicePrincipal("ec2.amazonaws.com"),
        )
        role.add_managed_policy(
            iam.ManagedPolicy.from_aws_managed_policy_name("AmazonSSMManagedInstanceCore")
        )

        instance = ec2.Instance(
            self,
            "Instance",
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
            instance_type=ec2.InstanceType(config.instance_type),
            machine_image=ec2.MachineImage.latest_amazon_linux2023(),
            security_group=instance_sg,
            key_pair=key_pair,
            role=role,
            require_imdsv2=True,
        )

        # ── RDS MySQL 8.0 ─────────────────────────────────────────────────────
        db_secret = secretsmanager.Secret(
            self,
            "DbSecret",
            generate_secret_string=secretsmanager.SecretStringGenerator(
                secret_string_template=f'{{"username":"{DB_USER}"}}',
                generate_string_key="password",
                exclude_punctuation=True,
            ),
            removal_policy=RemovalPolicy.DESTROY,
        )

        db = rds.DatabaseInstance(
            self,
            "Db",
            engine=rds.DatabaseInstanceEngine.mysql(
                version=rds.MysqlEngineVersion.VER_8_0,
            ),
            instance_type=ec2.InstanceType(config.db_instance_type),
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(
                subnet_type=ec2.SubnetType.PRIVATE_ISOLATED
            ),
            security_groups=[db_sg],
            port=DB_PORT,
            database_name=DB_NAME,
            allocated_storage=config.db_allocated_storage,
            credentials=rds.Credentials.from_secret(db_secret),
            deletion_protection=False,
            delete_automated_backups=True,
            removal_policy=RemovalPolicy.DESTROY,
        )
        db_secret.grant_read(role)

        # ── Bootstrap script ──────────────────────────────────────────────────
        bootstrap = s3_assets.Asset(
            self,
            "BootstrapScript",
            path=str(config.bootstrap_script),
        )
        bootstrap.grant_read(role)
        local_path = instance.user_data.add_s3_download_command(
            bucket=bootstrap.bucket,
            bucket_key=bootstrap.s3_object_key,
        )
        instance.user_data.add_execute_file_command(
            file_path=local_path,
            arguments=(
                f"{db.db_instance_endpoint_address} {db.db_instance_endpoint_port} "
                f"{db_secret.secret_arn} {self.region}"
            ),
        )

        # ── Stack outputs ─────────────────────────────────────────────────────
        CfnOutput(
            self,
            "IpAddress",
            value=instance.instance_public_ip,
            description="WordPress host public IP",
        )
        CfnOutput(
            self,
            "DownloadKeyCommand",
            value=(
                "aws ssm get-parameter"
                f" --name {key_pair.private_key.parameter_name}"
                " --with-decryption --query Parameter.Value --output text"
                f" > {KEY_FILE} && chmod 400 {KEY_FILE}"
            ),
            description="Fetch the SSH private key",
        )
        CfnOutput(
            self,
            "SshCommand",
            value=f"ssh -i {KEY_FILE} -o IdentitiesOnly=yes {SSH_USER}@{instance.instance_public_ip}",
            description="SSH into the WordPress host",
        )
        CfnOutput(
            self,
            "DbEndpoint",
            value=db.db_instance_endpoint_address,
            description="RDS endpoint",
        )

        self.vpc = vpc
        self.instance = instance
        self.instance_sg = instance_sg
        self.db_sg = db_sg
        self.database = db
        self.db_secret = db_secret
        self.role = role

        logger.info("stack_declared", stack=construct_id, kind="instance", secrets=1)
