#!/usr/bin/env python3
"""
CDK app entry point.

Usage
-----
Install the project first (from the repo root):
    pip install -e .

Bootstrap (once per account/region):
    cdk bootstrap aws://<ACCOUNT_ID>/<REGION>

Deploy the ECS Fargate stack:
    cdk deploy WordpressCdkStack \
        --context certificate_arn=<ACM_ARN> \
        --context hosted_zone_id=<ZONE_ID> \
        --context hosted_zone_name=<ZONE_NAME> \
        --context a_record_name=<RECORD_NAME>

Deploy the single EC2 host stack instead:
    cdk deploy WordpressInstanceStack \
        --context stack_kind=instance \
        --context ssh_cidr=<YOUR_IP>/32

Every context key can also be set as a WORDPRESS_<KEY> environment variable
or in a .env file. Only one of the two stacks is declared per synth.
"""

from wordpress_cdk.main import main

main()
