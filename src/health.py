from panic_service import __version__
from panic_service.config import load_settings
from panic_service.logger import get_logger
from panic_service.responses import ApiResponse

logger = get_logger("health")


def lambda_handler(event, context):
    settings = load_settings(require_table=False)
    logger.info(
        "health.check",
        extra={
            "path": "/health",
            "method": ((event.get("requestContext") or {}).get("http") or {}).get("method", "GET"),
            "configured": settings.configured,
        },
    )
    return ApiResponse(
        200,
        {"status": "ok", "configured": settings.configured, "version": __version__},
    ).to_proxy()
