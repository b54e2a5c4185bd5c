import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from email_analyzer.assistants.normalizer import normalize
from email_analyzer.assistants.runner import AssistantRunner
from email_analyzer.config import Settings, get_settings
from email_analyzer.dependencies import get_runner
from email_analyzer.errors import ConfigurationError, IncompleteJobError
from email_analyzer.utils.log_helpers import create_log

logger = logging.getLogger(__name__)

router = APIRouter()

CONFIG_ERROR_MESSAGE = "API configuration error. Please contact system administrator."


async def read_email_body(request: Request):
    """Pull `EmailBody` out of a JSON or form-encoded request body."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            payload = await request.json()
        else:
            payload = await request.form()
    except Exception as e:
        logger.warning(f"Could not parse request body: {e}")
        return None

    if not hasattr(payload, "get"):
        return None
    email_body = payload.get("EmailBody")
    if not isinstance(email_body, str) or not email_body:
        return None
    return email_body


@router.post("/analyze", tags=["Analyze"])
async def analyze_email(
    request: Request,
    runner: AssistantRunner = Depends(get_runner),
    settings: Settings = Depends(get_settings),
):
    """Run an email body through the assistant"""
    try:
        runner.check_configuration()

        email_body = await read_email_body(request)
        if email_body is None:
            return JSONResponse(status_code=400, content={"error": "EmailBody parameter is required"})

        response_text = await runner.handle_analysis(email_body)

        if settings.response_mode == "structured":
            return normalize(response_text)
        return {"response": response_text}

    except Exception as e:
        logger.exception(f"Error processing request: {e}")
        if settings.file_logging:
            await create_log(
                "error.log",
                {
                    "error": str(e),
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "environment": settings.environment,
                },
                settings.log_dir,
            )

        if isinstance(e, IncompleteJobError):
            return JSONResponse(
                status_code=500,
                content={"error": "Processing not completed", "status": e.status},
            )
        if isinstance(e, ConfigurationError):
            return JSONResponse(status_code=500, content={"error": CONFIG_ERROR_MESSAGE})
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
