"""WordPress authentication keys and salts, one generated secret each."""

from typing import NamedTuple

from aws_cdk import RemovalPolicy
from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct


class SaltSecret(NamedTuple):
    construct_id: str
    env_name: str


WORDPRESS_SALTS = (
    SaltSecret("WpAuthKey", "WORDPRESS_AUTH_KEY"),
    SaltSecret("WpSecureAuthKey", "WORDPRESS_SECURE_AUTH_KEY"),
    SaltSecret("WpLoggedInKey", "WORDPRESS_LOGGED_IN_KEY"),
    SaltSecret("WpNonceKey", "WORDPRESS_NONCE_KEY"),
    SaltSecret("WpAuthSalt", "WORDPRESS_AUTH_SALT"),
    SaltSecret("WpSecureAuthSalt", "WORDPRESS_SECURE_AUTH_SALT"),
    SaltSecret("WpLoggedInSalt", "WORDPRESS_LOGGED_IN_SALT"),
    SaltSecret("WpNonceSalt", "WORDPRESS_NONCE_SALT"),
)

SALT_LENGTH = 64
# wp-config.php quotes these values
SALT_EXCLUDED_CHARACTERS = "'\""


def declare_salt_secrets(scope: Construct) -> dict[str, secretsmanager.Secret]:
    """Declare every WordPress key/salt secret, keyed by container env name."""
    return {
        salt.env_name: secretsmanager.Secret(
            scope,
            salt.construct_id,
            generate_secret_string=secretsmanager.SecretStringGenerator(
                exclude_characters=SALT_EXCLUDED_CHARACTERS,
                password_length=SALT_LENGTH,
            ),
            removal_policy=RemovalPolicy.DESTROY,
        )
        for salt in WORDPRESS_SALTS
    }
