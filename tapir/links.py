"""
Deep link and notification routing.

The reminder activity and the reminder notification both lead the user to
the dream recording screen; the companion activity offers a link to swap its
signature. This module translates those entry points into coordinator calls
and OpenDreamRecordingEvents for the UI layer.
"""

import structlog
from typing import Optional
from urllib.parse import urlparse
from tapir.activities.companion import CompanionCoordinator
from tapir.activities.reminder import ReminderCoordinator
from tapir.core.bus import EventBus
from tapir.core.config import DeepLinkConfig, LiveActivityConfig
from tapir.events.system import OpenDreamRecordingEvent

DREAM_REMINDER = "dreamreminder"
REFRESH_SIGNATURE = "refreshsignature"

class DeepLinkRouter:
    """Routes ``tapirtwins://`` URLs and notification taps."""

    def __init__(self,
                 reminder: ReminderCoordinator,
                 companion: CompanionCoordinator,
                 event_bus: Optional[EventBus] = None,
                 config: Optional[DeepLinkConfig] = None,
                 activity_config: Optional[LiveActivityConfig] = None):
        self.reminder = reminder
        self.companion = companion
        self.event_bus = event_bus
        self.config = config or DeepLinkConfig()
        self.activity_config = activity_config or reminder.config
        self.name = self.__class__.__name__
        self.logger = structlog.get_logger(component="deep_link")

    async def handle_url(self, url: str) -> bool:
        """
        Handle a deep link.

        Args:
            url: The URL the application was opened with

        Returns:
            True if the URL was recognised, False otherwise
        """
        parsed = urlparse(url)
        if parsed.scheme != self.config.scheme:
            self.logger.debug("Ignoring URL with foreign scheme", url=url)
            return False

        self.logger.info("Deep link received", url=url)
        target = (parsed.netloc or parsed.path.lstrip("/")).lower()

        if target == DREAM_REMINDER:
            await self._open_dream_recording("deep_link", url)
            # No-op when nothing is shown on the activity surface
            await self.reminder.update(self.activity_config.recording_message)
            return True

        if target == REFRESH_SIGNATURE:
            await self.companion.update_now()
            return True

        self.logger.warning("Unknown deep link target", url=url, target=target)
        return False

    async def handle_notification(self, identifier: str) -> bool:
        """
        Handle a tap on a local notification.

        Args:
            identifier: The notification request identifier

        Returns:
            True if the notification belongs to the dream reminder
        """
        if identifier != self.config.dream_reminder_notification:
            return False
        await self._open_dream_recording("notification")
        return True

    async def _open_dream_recording(self, source: str, url: Optional[str] = None) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(
                OpenDreamRecordingEvent(producer_name=self.name, source=source, url=url),
                self.name)
