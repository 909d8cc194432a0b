"""Cached boto3 clients, reused across warm Lambda invocations."""
from typing import Dict, Tuple

import boto3
from botocore.config import Config

_RETRY_CONFIG = Config(retries={"max_attempts": 3, "mode": "standard"})

_clients: Dict[Tuple[str, str], object] = {}


def get_client(service: str, region: str):
    key = (service, region)
    if key not in _clients:
        _clients[key] = boto3.client(service, region_name=region, config=_RETRY_CONFIG)
    return _clients[key]
