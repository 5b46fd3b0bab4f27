"""GC Notify client."""

import calendar
import json
import time
from typing import Any, Dict, Optional

import jwt
import requests
import structlog

logger = structlog.get_logger()

EMAIL_ENDPOINT = "/v2/notifications/email"


# generate the epoch seconds for the jwt token
def epoch_seconds():
    return calendar.timegm(time.gmtime())


def create_jwt_token(secret, client_id):
    """
    Generate a JWT Token for the Notify API

    Tokens have a header consisting of:
    {
        "typ": "JWT",
        "alg": "HS256"
    }

    Claims are:
    iss: service id
    iat: epoch seconds for the token (UTC)
    """
    if not secret:
        logger.error("jwt_token_creation_failed", error="Missing secret key")
        raise ValueError("Missing secret key")
    if not client_id:
        logger.error("jwt_token_creation_failed", error="Missing client id")
        raise ValueError("Missing client id")

    headers = {"typ": "JWT", "alg": "HS256"}
    claims = {"iss": client_id, "iat": epoch_seconds()}
    return jwt.encode(payload=claims, key=secret, headers=headers)


def create_authorization_header(service_id: Optional[str], secret: Optional[str]):
    """Build the (name, value) authorization header for the Notify API."""
    if not service_id:
        error = "NOTIFY_SERVICE_ID is missing"
        logger.error("authorization_header_creation_failed", error=error)
        raise ValueError(error)
    if not secret:
        error = "NOTIFY_API_SECRET is missing"
        logger.error("authorization_header_creation_failed", error=error)
        raise ValueError(error)

    token = create_jwt_token(secret=secret, client_id=service_id)
    return "Authorization", "Bearer {}".format(token)


def send_email(
    api_url: str,
    service_id: Optional[str],
    secret: Optional[str],
    email_address: str,
    template_id: str,
    personalisation: Dict[str, Any],
    reference: Optional[str] = None,
    timeout: int = 10,
) -> requests.Response:
    """POST an email notification to GC Notify.

    Returns the raw response; callers decide what counts as success
    (Notify answers 201 Created).
    """
    header_key, header_value = create_authorization_header(service_id, secret)
    body: Dict[str, Any] = {
        "email_address": email_address,
        "template_id": template_id,
        "personalisation": personalisation,
    }
    if reference:
        body["reference"] = reference

    return requests.post(
        api_url.rstrip("/") + EMAIL_ENDPOINT,
        data=json.dumps(body, default=str),
        headers={header_key: header_value, "Content-Type": "application/json"},
        timeout=timeout,
    )
