from botocore.exceptions import BotoCoreError, ClientError

from panic_service.errors import DependencyWriteError
from panic_service.models import QueueMessage


class QueuePublisher:
    """Publishes processing messages to the SQS queue at ``queue_url``."""

    def __init__(self, client, queue_url: str):
        self.client = client
        self.queue_url = queue_url

    def publish(self, message: QueueMessage) -> str:
        """Send ``message`` and return the SQS MessageId."""
        try:
            resp = self.client.send_message(
                QueueUrl=self.queue_url,
                MessageBody=message.to_json(),
            )
        except (BotoCoreError, ClientError) as e:
            raise DependencyWriteError("queue.publish", message.panic_id, str(e)) from e
        return resp.get("MessageId", "")
