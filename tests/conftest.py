"""Shared pytest fixtures."""

import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from wordpress_cdk.config import Settings
from wordpress_cdk.stacks.container_stack import (
    WordpressContainerConfig,
    WordpressContainerStack,
)
from wordpress_cdk.stacks.instance_stack import (
    WordpressInstanceConfig,
    WordpressInstanceStack,
)

CERTIFICATE_ARN = (
    "arn:aws:acm:us-east-1:123456789012:certificate/"
    "0a1b2c3d-4e5f-6a7b-8c9d-0e1f2a3b4c5d"
)
HOSTED_ZONE_ID = "Z0123456789ABCDEFGHIJ"
HOSTED_ZONE_NAME = "example.com"
A_RECORD_NAME = "blog"
OPERATOR_CIDR = "203.0.113.0/24"


def make_container_config(**overrides) -> WordpressContainerConfig:
    values = {
        "certificate_arn": CERTIFICATE_ARN,
        "hosted_zone_id": HOSTED_ZONE_ID,
        "hosted_zone_name": HOSTED_ZONE_NAME,
        "a_record_name": A_RECORD_NAME,
    }
    values.update(overrides)
    return WordpressContainerConfig(**values)


def logical_id(stack: cdk.Stack, construct) -> str:
    return stack.get_logical_id(construct.node.default_child)


def statements_for_role(template: Template, role_id: str) -> list[dict]:
    """Every IAM statement attached to a role through AWS::IAM::Policy."""
    statements = []
    for policy in template.find_resources("AWS::IAM::Policy").values():
        props = policy["Properties"]
        if {"Ref": role_id} not in props.get("Roles", []):
            continue
        statements.extend(props["PolicyDocument"]["Statement"])
    return statements


def grants_read(statement: dict, secret_id: str) -> bool:
    actions = statement["Action"]
    if isinstance(actions, str):
        actions = [actions]
    resources = statement["Resource"]
    if not isinstance(resources, list):
        resources = [resources]
    return (
        statement["Effect"] == "Allow"
        and "secretsmanager:GetSecretValue" in actions
        and {"Ref": secret_id} in resources
    )


@pytest.fixture
def base_settings(monkeypatch) -> Settings:
    for key in ("STACK_KIND", "STACK_ID", "STRICT_CONFIG", "SSH_CIDR"):
        monkeypatch.delenv(f"WORDPRESS_{key}", raising=False)
    return Settings(_env_file=None)


@pytest.fixture(scope="session")
def container_stack() -> WordpressContainerStack:
    app = cdk.App()
    return WordpressContainerStack(app, "TestWordpress", config=make_container_config())


@pytest.fixture(scope="session")
def container_template(container_stack) -> Template:
    return Template.from_stack(container_stack)


@pytest.fixture(scope="session")
def instance_stack() -> WordpressInstanceStack:
    app = cdk.App()
    return WordpressInstanceStack(
        app,
        "TestWordpressInstance",
        config=WordpressInstanceConfig(ssh_cidr=OPERATOR_CIDR),
    )


@pytest.fixture(scope="session")
def instance_template(instance_stack) -> Template:
    return Template.from_stack(instance_stack)
