#!/usr/bin/env python3
"""
Notification Channels

Each channel hands a lifecycle event to one transport. Delivery guarantees,
templating and user preferences belong to the downstream system; channels
only report whether the hand-off succeeded.

Usage:
    from notification.channels import NotificationChannelFactory

    channel = NotificationChannelFactory.get_channel('webhook', url='https://hooks.example.com/x')
    channel.send(subject, body, metadata)
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from datetime import datetime, timezone
import logging
import urllib.parse

import requests

logger = logging.getLogger(__name__)


def _validate_webhook_url(url: Optional[str]) -> bool:
    """Webhook URLs must be absolute http(s) URLs with a hostname."""
    if not url:
        return False
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ('http', 'https'):
        logger.error(f"Invalid URL scheme: {parsed.scheme}")
        return False
    if not parsed.hostname:
        logger.error("URL missing hostname")
        return False
    return True


class NotificationChannel(ABC):
    """
    Abstract base class for all notification channels.

    Any channel can be used interchangeably by NotificationService.
    """

    @property
    @abstractmethod
    def channel_type(self) -> str:
        """Return the channel type identifier."""
        pass

    @abstractmethod
    def send(self, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        """
        Send a notification through this channel.

        Args:
            subject: Notification subject/title
            body: Notification body
            metadata: Event type and payload

        Returns:
            True if sent successfully, False otherwise
        """
        pass

    def validate_config(self) -> bool:
        return True


class LogChannel(NotificationChannel):
    """Writes events to the application log. Default channel for development."""

    @property
    def channel_type(self) -> str:
        return 'log'

    def send(self, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        logger.info(f"[notification:{metadata.get('event_type', 'event')}] {subject} - {body}")
        return True


class WebhookChannel(NotificationChannel):
    """Generic webhook notification channel."""

    def __init__(self, url: Optional[str] = None, timeout_seconds: int = 10):
        self.url = url
        self.timeout_seconds = timeout_seconds

    @property
    def channel_type(self) -> str:
        return 'webhook'

    def validate_config(self) -> bool:
        return _validate_webhook_url(self.url)

    def send(self, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        """Send webhook POST request."""
        if not self.validate_config():
            logger.error(f"Invalid or missing webhook URL: {self.url}")
            return False

        payload = {
            'type': metadata.get('event_type'),
            'subject': subject,
            'body': body,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'data': metadata.get('payload', {}),
        }
        headers = {
            'Content-Type': 'application/json',
            'User-Agent': 'HireLoop-Notification-Service/1.0'
        }

        try:
            response = requests.post(
                self.url,
                json=payload,
                headers=headers,
                timeout=self.timeout_seconds
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to send webhook: {e}")
            return False

        parsed = urllib.parse.urlparse(self.url)
        safe_url = f"{parsed.scheme}://{parsed.hostname}{parsed.path}"
        logger.info(f"Webhook sent to {safe_url}")
        return True


class NotificationChannelFactory:
    """
    Factory for creating notification channels.

    New channels are added by registering them; existing code stays untouched.
    """

    _channels: Dict[str, type] = {
        'log': LogChannel,
        'webhook': WebhookChannel,
    }

    @classmethod
    def get_channel(cls, channel_type: str, **options) -> NotificationChannel:
        """
        Get a channel instance by type.

        Raises:
            ValueError: If the channel type is not registered.
        """
        channel_class = cls._channels.get(channel_type.lower())
        if channel_class is None:
            raise ValueError(
                f"Unknown channel type: {channel_type}. "
                f"Available: {', '.join(cls.list_channels())}"
            )
        return channel_class(**options)

    @classmethod
    def register_channel(cls, channel_type: str, channel_class: type) -> None:
        if not issubclass(channel_class, NotificationChannel):
            raise ValueError(f"{channel_class} must inherit from NotificationChannel")
        cls._channels[channel_type.lower()] = channel_class
        logger.info(f"Registered notification channel: {channel_type}")

    @classmethod
    def list_channels(cls) -> List[str]:
        return sorted(cls._channels.keys())
