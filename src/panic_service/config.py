import os
from dataclasses import dataclass
from typing import Optional

from panic_service.errors import ConfigurationError
from panic_service.logger import get_logger

logger = get_logger("config")

DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class Settings:
    table_name: Optional[str]
    queue_url: Optional[str]
    region: str = DEFAULT_REGION

    @property
    def configured(self) -> bool:
        return bool(self.table_name and self.queue_url)


def load_settings(require_table: bool = True, require_queue: bool = False) -> Settings:
    """
    Load environment configuration for a handler.

    DYNAMODB_TABLE_NAME: DynamoDB table holding panic records
    SQS_QUEUE_URL: SQS queue the intake publishes processing messages to
    AWS_REGION: region for boto3 clients (defaults to us-east-1)

    Raises ConfigurationError naming every missing variable the caller needs.
    Values are read on every call so a misconfigured container keeps failing
    loudly instead of caching a bad state.
    """
    table_name = (os.getenv("DYNAMODB_TABLE_NAME") or "").strip() or None
    queue_url = (os.getenv("SQS_QUEUE_URL") or "").strip() or None
    region = os.getenv("AWS_REGION") or DEFAULT_REGION

    missing = []
    if require_table and not table_name:
        missing.append("DYNAMODB_TABLE_NAME")
    if require_queue and not queue_url:
        missing.append("SQS_QUEUE_URL")

    if missing:
        err = ConfigurationError(missing)
        logger.error(str(err), extra={"missing": missing})
        raise err

    return Settings(table_name=table_name, queue_url=queue_url, region=region)
