from wordpress_cdk.stacks.container_stack import (
    WordpressContainerConfig,
    WordpressContainerStack,
)
from wordpress_cdk.stacks.instance_stack import (
    WordpressInstanceConfig,
    WordpressInstanceStack,
)

__all__ = [
    "WordpressContainerConfig",
    "WordpressContainerStack",
    "WordpressInstanceConfig",
    "WordpressInstanceStack",
]
