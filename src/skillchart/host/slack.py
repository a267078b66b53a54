"""Slack incoming-webhook notifier."""

from typing import Any, Dict, Optional

import requests

from skillchart.core.logging import get_logger
from skillchart.errors import NotificationError
from skillchart.net.network import RetryConfig, post_json

logger = get_logger(__name__)


def build_payload(text: str) -> Dict[str, Any]:
    """Block Kit payload with a single mrkdwn section."""
    return {
        "blocks": [
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": text},
            }
        ]
    }


class SlackNotifier:
    """Posts a message for each submitted skill check."""

    def __init__(
        self,
        webhook_url: str,
        template: str,
        *,
        session: Optional[requests.Session] = None,
        retry: Optional[RetryConfig] = None,
    ):
        self.webhook_url = webhook_url
        self.template = template
        self.session = session or requests.Session()
        self.retry = retry

    def format_message(self, organization: str, person: str, link: str) -> str:
        return self.template.format(organization=organization, person=person, link=link)

    def notify(self, organization: str, person: str, link: str) -> None:
        payload = build_payload(self.format_message(organization, person, link))
        try:
            post_json(self.session, self.webhook_url, payload, config=self.retry)
        except requests.RequestException as exc:
            raise NotificationError(f"Webhook notification failed: {exc}") from exc
        logger.info("Notified webhook about {} {}", organization, person)
