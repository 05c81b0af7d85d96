"""Build the CDK app: resolve configuration and declare one WordPress stack."""

from typing import Optional

import aws_cdk as cdk

from wordpress_cdk.config import Settings, settings
from wordpress_cdk.exceptions.config_exceptions import (
    MissingPlaceholderError,
    UnknownStackKindError,
)
from wordpress_cdk.logging_config import configure_logging, get_logger
from wordpress_cdk.stacks.container_stack import (
    WordpressContainerConfig,
    WordpressContainerStack,
)
from wordpress_cdk.stacks.instance_stack import (
    WordpressInstanceConfig,
    WordpressInstanceStack,
)
from wordpress_cdk.validators.cidr_validator import SshCidrValidator
from wordpress_cdk.validators.placeholder_validator import PlaceholderValidator

logger = get_logger(__name__)

DEFAULT_STACK_IDS = {
    "container": "WordpressCdkStack",
    "instance": "WordpressInstanceStack",
}

# CDK context keys that override the matching Settings fields
CONTEXT_KEYS = (
    "environment",
    "log_level",
    "aws_account",
    "aws_region",
    "stack_kind",
    "stack_id",
    "a_record_name",
    "certificate_arn",
    "hosted_zone_id",
    "hosted_zone_name",
    "strict_config",
    "ssh_cidr",
    "instance_type",
    "db_instance_type",
)


def resolve_settings(app: cdk.App, base: Settings) -> Settings:
    """Overlay CDK context values (``--context key=value``) on the settings."""
    overrides = {}
    for key in CONTEXT_KEYS:
        value = app.node.try_get_context(key)
        if value is not None:
            overrides[key] = value
    if not overrides:
        return base
    return Settings.model_validate({**base.model_dump(), **overrides})


def _stack_env(config: Settings) -> Optional[cdk.Environment]:
    if config.aws_account is None and config.aws_region is None:
        return None
    return cdk.Environment(account=config.aws_account, region=config.aws_region)


def declare_container_stack(app: cdk.App, config: Settings, stack_id: str) -> cdk.Stack:
    stack_config = WordpressContainerConfig(
        certificate_arn=config.certificate_arn,
        hosted_zone_id=config.hosted_zone_id,
        hosted_zone_name=config.hosted_zone_name,
        a_record_name=config.a_record_name,
    )
    try:
        PlaceholderValidator().validate(stack_config)
    except MissingPlaceholderError as exc:
        if config.strict_config:
            raise
        logger.warning("config_placeholder_missing", fields=exc.fields)

    return WordpressContainerStack(app, stack_id, config=stack_config, env=_stack_env(config))


def declare_instance_stack(app: cdk.App, config: Settings, stack_id: str) -> cdk.Stack:
    stack_config = WordpressInstanceConfig(
        instance_type=config.instance_type,
        db_instance_type=config.db_instance_type,
        ssh_cidr=config.ssh_cidr,
    )
    SshCidrValidator().validate(stack_config)
    if stack_config.ssh_cidr == "0.0.0.0/0":
        logger.warning("ssh_open_to_world", ssh_cidr=stack_config.ssh_cidr)

    return WordpressInstanceStack(app, stack_id, config=stack_config, env=_stack_env(config))


STACK_BUILDERS = {
    "container": declare_container_stack,
    "instance": declare_instance_stack,
}


def build_app(app: Optional[cdk.App] = None, base: Optional[Settings] = None) -> cdk.App:
    app = app or cdk.App()
    config = resolve_settings(app, base or settings)

    builder = STACK_BUILDERS.get(config.stack_kind)
    if builder is None:
        raise UnknownStackKindError(
            f"Unknown stack kind {config.stack_kind!r}; expected one of "
            f"{', '.join(sorted(STACK_BUILDERS))}."
        )

    stack_id = config.stack_id or DEFAULT_STACK_IDS[config.stack_kind]
    logger.info("stack_selected", kind=config.stack_kind, stack=stack_id)
    builder(app, config, stack_id)
    return app


def main() -> None:
    app = cdk.App()
    configure_logging(resolve_settings(app, settings))
    build_app(app).synth()
