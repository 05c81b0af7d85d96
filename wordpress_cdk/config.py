from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WORDPRESS_", env_file=".env", env_file_encoding="utf-8"
    )

    environment: str = "development"
    log_level: str = "INFO"

    # Which of the two stack definitions to synthesize
    stack_kind: str = "container"
    stack_id: Optional[str] = None

    # DNS / TLS placeholders for the container stack (left empty on purpose)
    a_record_name: str = ""
    certificate_arn: str = ""
    hosted_zone_id: str = ""
    hosted_zone_name: str = ""
    strict_config: bool = False

    # Instance stack
    ssh_cidr: str = "0.0.0.0/0"
    instance_type: str = "t3.micro"
    db_instance_type: str = "t3.micro"

    aws_account: Optional[str] = None
    aws_region: Optional[str] = None


settings = Settings()
