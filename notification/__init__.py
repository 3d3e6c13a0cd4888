"""
Notification Module

Hands lifecycle events to log and webhook channels.

Usage:
    from notification import NotificationService

    service = NotificationService(config.notifications)
    service.notify('chat_opened', {'match_id': '...', 'room_id': '...'})
"""

from notification.channels import (
    NotificationChannel,
    LogChannel,
    WebhookChannel,
    NotificationChannelFactory,
)
from notification.message_builder import NotificationMessageBuilder
from notification.service import NotificationService, EVENT_TYPES

__all__ = [
    'NotificationChannel',
    'LogChannel',
    'WebhookChannel',
    'NotificationChannelFactory',
    'NotificationMessageBuilder',
    'NotificationService',
    'EVENT_TYPES',
]
