import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    def to_proxy(self) -> Dict[str, Any]:
        """Render as an API Gateway Lambda proxy response."""
        return {
            "statusCode": self.status_code,
            "headers": dict(JSON_HEADERS),
            "body": json.dumps(self.body, default=str),
        }


def message_response(status_code: int, message: str, panic_id: Optional[str] = None) -> ApiResponse:
    body: Dict[str, Any] = {"message": message}
    if panic_id:
        body["panicId"] = panic_id
    return ApiResponse(status_code, body)


MISSING_CONFIGURATION = "Internal server error: Missing configuration."
