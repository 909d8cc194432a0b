"""
Panic Service
=============

Shared package for the AWS-native panic event microservice. A panic event is
accepted over HTTP, written to DynamoDB in state RECEIVED, queued on SQS and
later advanced by an SQS-triggered worker. Records are read back by id.

Lambda entry points (top-level modules next to this package):
- create_panic.py   → HTTP endpoint for event intake (POST /panic)
- process_panic.py  → SQS-triggered processor advancing record status
- get_panic.py      → HTTP endpoint for single-record lookup (GET /panic/{id})
- health.py         → Health check (GET /health)

Modules under this package:
- config.py     → environment settings
- logger.py     → structured JSON logging
- errors.py     → error taxonomy
- models.py     → record, request and queue message types
- responses.py  → API Gateway proxy responses
- store.py      → DynamoDB record store
- queue.py      → SQS publisher
- clients.py    → cached boto3 clients
- intake.py / worker.py / lookup.py → the services

Environment variables expected:
  • DYNAMODB_TABLE_NAME   - DynamoDB table holding panic records
  • SQS_QUEUE_URL         - URL of the SQS processing queue (intake only)
  • AWS_REGION            - AWS region for all resources
  • LOG_LEVEL             - Log verbosity (default: INFO)

All handlers are stateless and Lambda-optimized.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
