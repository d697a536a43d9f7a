import json
import logging
from typing import Mapping, Tuple, Optional
import requests
from .config import WhatsAppConfig

# Setup logger
logger = logging.getLogger(__name__)

GRAPH_URL = "https://graph.facebook.com"


def _api_url(config: WhatsAppConfig) -> str:
    return f"{GRAPH_URL}/{config.VERSION}/{config.PHONE_NUMBER_ID}/messages"


def _phone_number_url(config: WhatsAppConfig) -> str:
    return f"{GRAPH_URL}/{config.VERSION}/{config.PHONE_NUMBER_ID}"


def _headers(config: WhatsAppConfig) -> dict:
    return {
        "Content-type": "application/json",
        "Authorization": f"Bearer {config.ACCESS_TOKEN}",
    }


def _get_text_payload(recipient: str, text: str) -> str:
    return json.dumps(
        {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": recipient,
            "type": "text",
            "text": {"preview_url": False, "body": text},
        }
    )


def send_whatsapp_text(
    to: str,
    text: str,
    config: Optional[WhatsAppConfig] = None,
    timeout: Optional[float] = None,
) -> Tuple[Mapping, int]:
    """
    Sends a WhatsApp message.

    Arguments:
        to (str): The recipient's normalized phone number.
        text (str): The message body.
        config (WhatsAppConfig, optional): Dependency injection for config.
        timeout (float, optional): Per-call timeout, defaults to config.SEND_TIMEOUT.
    """
    cfg = config or WhatsAppConfig()

    if not (cfg.is_complete and to):
        logger.error("Missing WhatsApp configuration or recipient")
        return {"status": "error", "message": "Missing configuration"}, 500

    resp = None
    try:
        resp = requests.post(
            _api_url(cfg),
            data=_get_text_payload(to, text),
            headers=_headers(cfg),
            timeout=timeout or cfg.SEND_TIMEOUT,
        )
        resp.raise_for_status()
        return resp.json(), resp.status_code

    except requests.Timeout:
        logger.error("WhatsApp request timed out")
        return {"status": "error", "message": "Request timed out"}, 408

    except requests.RequestException as e:
        logger.error(f"WhatsApp send error: {e}")

        # resp only exists if the server replied (e.g. 400/500 error)
        if resp is not None:
            try:
                return resp.json(), resp.status_code
            except ValueError:
                return {"status": "error", "message": resp.text}, resp.status_code
        return {"status": "error", "message": "Failed to send message"}, 500


def check_phone_number(config: WhatsAppConfig, timeout: Optional[float] = None) -> int:
    """
    Probe the business phone number endpoint. Returns the HTTP status code,
    or 0 when the Graph API could not be reached at all.
    """
    if not config.is_complete:
        return 0
    try:
        resp = requests.get(
            _phone_number_url(config),
            headers=_headers(config),
            timeout=timeout or config.SEND_TIMEOUT,
        )
        return resp.status_code
    except requests.RequestException as e:
        logger.warning(f"WhatsApp probe failed: {e}")
        return 0
