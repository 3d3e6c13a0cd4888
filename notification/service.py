#!/usr/bin/env python3
"""
Notification Service

Fans lifecycle events (status_update, exam_completed, chat_opened) out to the
configured channels. Notifications are best-effort: a failing channel is
logged and never fails the operation that produced the event.

Usage:
    from notification.service import NotificationService

    service = NotificationService(config.notifications)
    service.notify('status_update', {'match_id': '...', 'new_status': 'screening'})
"""

import logging
from typing import Any, Dict, List, Optional

from core.config_loader import NotificationConfig
from notification.channels import NotificationChannel, NotificationChannelFactory
from notification.message_builder import NotificationMessageBuilder

logger = logging.getLogger(__name__)

EVENT_TYPES = ('status_update', 'exam_completed', 'chat_opened')


class NotificationService:
    """
    Main notification service.

    Coordinates:
    1. Channel selection (via NotificationChannelFactory)
    2. Message rendering (via NotificationMessageBuilder)
    3. Hand-off to every enabled channel
    """

    def __init__(
        self,
        config: Optional[NotificationConfig] = None,
        channels: Optional[List[NotificationChannel]] = None
    ):
        self.config = config or NotificationConfig()
        self.channels = channels if channels is not None else self._build_channels()

    def _build_channels(self) -> List[NotificationChannel]:
        channels = []
        for channel_type in self.config.channels:
            options: Dict[str, Any] = {}
            if channel_type == 'webhook':
                options = {'url': self.config.webhook_url, 'timeout_seconds': self.config.timeout_seconds}
            try:
                channels.append(NotificationChannelFactory.get_channel(channel_type, **options))
            except ValueError as e:
                logger.warning(f"Skipping notification channel: {e}")
        return channels

    @property
    def enabled(self) -> bool:
        return self.config.enabled and bool(self.channels)

    def notify(self, event_type: str, payload: Dict[str, Any]) -> List[str]:
        """
        Send an event to all channels.

        Args:
            event_type: One of EVENT_TYPES
            payload: JSON-serializable event data

        Returns:
            Channel types that accepted the event
        """
        if not self.enabled:
            logger.debug(f"Notifications disabled; dropping {event_type}")
            return []

        if event_type not in EVENT_TYPES:
            logger.warning(f"Unknown notification event type: {event_type}")

        subject, body = NotificationMessageBuilder.build(event_type, payload)
        metadata = {'event_type': event_type, 'payload': payload}

        delivered = []
        for channel in self.channels:
            if channel.send(subject, body, metadata):
                delivered.append(channel.channel_type)
            else:
                logger.warning(f"Channel {channel.channel_type} failed to deliver {event_type}")
        return delivered
