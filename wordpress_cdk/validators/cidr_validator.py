import ipaddress

from wordpress_cdk.exceptions.config_exceptions import InvalidCidrError
from wordpress_cdk.stacks.instance_stack import WordpressInstanceConfig
from wordpress_cdk.validators.base import ConfigValidator


class SshCidrValidator(ConfigValidator):
    def validate(self, config: WordpressInstanceConfig) -> None:
        try:
            ipaddress.IPv4Network(config.ssh_cidr, strict=True)
        except ValueError as exc:
            raise InvalidCidrError(
                f"SSH source {config.ssh_cidr!r} is not a valid IPv4 CIDR block: {exc}."
            ) from exc
