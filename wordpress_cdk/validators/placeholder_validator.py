import dataclasses

from wordpress_cdk.exceptions.config_exceptions import MissingPlaceholderError
from wordpress_cdk.stacks.container_stack import WordpressContainerConfig
from wordpress_cdk.validators.base import ConfigValidator


class PlaceholderValidator(ConfigValidator):
    def validate(self, config: WordpressContainerConfig) -> None:
        missing = [
            field.name
            for field in dataclasses.fields(config)
            if not getattr(config, field.name).strip()
        ]
        if missing:
            raise MissingPlaceholderError(missing)
