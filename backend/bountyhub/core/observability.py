import logging

from fastapi import Request

from bountyhub.core.api_response import get_request_id


def log_business_event(
    logger: logging.Logger,
    request: Request,
    *,
    event: str,
    actor_id: str | None = None,
    **fields,
) -> None:
    chunks = [f"event={event}", f"request_id={get_request_id(request)}", f"actor_id={actor_id or '-'}"]
    for key, value in sorted(fields.items()):
        chunks.append(f"{key}={value}")
    logger.info("business_event %s", " ".join(chunks))
