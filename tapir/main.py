"""
Main entry point for the Tapir Live Activity coordinator.

This module wires the coordinators to their host, clock and event bus,
configures logging and restores companion mode when the application starts
or returns to the foreground.
"""

import asyncio
import logging
import signal
import sys
import structlog
from dotenv import load_dotenv
from typing import Any, Dict, Optional

from tapir.activities import CompanionCoordinator, ReminderCoordinator
from tapir.core import AsyncioClock, Clock, EventBus, EventTracer, ApplicationConfig, get_config
from tapir.events.system import ApplicationStartupCompletedEvent
from tapir.host import ActivityHost, InMemoryActivityHost
from tapir.links import DeepLinkRouter

def setup_logging(level: str = "INFO"):
    """Configure structured logging for the application."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level, logging.INFO),
        stream=sys.stdout,
    )

class TapirApplication:
    """
    Owns the Live Activity coordinators of one application process.

    The host defaults to the in-memory implementation; a platform bridge can
    be passed in instead.
    """

    def __init__(self,
                 config: Optional[ApplicationConfig] = None,
                 host: Optional[ActivityHost] = None,
                 clock: Optional[Clock] = None):
        """Initialize the application and its coordinators."""
        self.logger = structlog.get_logger(app="tapir")
        self.config = config or get_config()
        self.clock = clock or AsyncioClock()

        if self.config.event.tracing_enabled:
            self.event_tracer = EventTracer(max_events=self.config.event.max_trace_events)
        else:
            self.event_tracer = None
        self.event_bus = EventBus(self.event_tracer)

        self.host = host or InMemoryActivityHost(self.config.host, self.clock)
        self.reminder = ReminderCoordinator(
            self.host, self.clock, self.config.live_activity, self.event_bus)
        self.companion = CompanionCoordinator(
            self.host, self.clock, self.config.live_activity, self.event_bus)
        self.router = DeepLinkRouter(
            self.reminder, self.companion, self.event_bus,
            self.config.deep_link, self.config.live_activity)

        self._running = True

    async def initialize(self):
        """Publish startup completion and restore companion mode."""
        self.logger.info("Initializing Tapir Live Activities")
        await self.event_bus.publish(
            ApplicationStartupCompletedEvent(producer_name="tapir"), "tapir")
        await self.restore_companion_mode()
        self.logger.info("Tapir Live Activities initialization complete")

    async def restore_companion_mode(self) -> bool:
        """
        Start companion mode if the user has it enabled.

        Returns:
            Whether companion mode was (re)started
        """
        if not self.config.companion_mode_enabled:
            return False
        await self.companion.start()
        self.logger.info("Companion mode restored",
                         active=self.companion.current_activity is not None)
        return True

    async def on_foreground(self) -> bool:
        """Called when the application returns to the foreground."""
        return await self.restore_companion_mode()

    def diagnostics(self) -> Dict[str, Any]:
        """
        Summarise coordinator state and recorded events.

        Returns:
            Dictionary with one entry per coordinator and the tracer statistics,
            or None for the latter when tracing is disabled
        """
        coordinators = {}
        for coordinator in (self.reminder, self.companion):
            coordinators[coordinator.kind] = {
                'state': coordinator.state.value,
                'activity_id': coordinator.current_activity.id if coordinator.current_activity else None,
                'last_error': str(coordinator.last_error) if coordinator.last_error else None,
            }
        return {
            'coordinators': coordinators,
            'events': self.event_tracer.get_event_stats() if self.event_tracer else None,
        }

    async def run(self):
        """Run the application main loop."""
        try:
            while self._running:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            self.logger.info("Application task cancelled")
        finally:
            await self.shutdown()

    async def shutdown(self):
        """
        Stop timers. Activities stay on the host and are picked up again by
        the next process through list_active().
        """
        self._running = False
        self.reminder.close()
        self.companion.close()
        self.logger.info("Tapir Live Activities shutdown complete")

    def handle_signal(self, sig):
        """Handle termination signals."""
        self.logger.info(f"Received signal {sig.name}, shutting down")
        self._running = False

async def main():
    """Application entry point."""
    load_dotenv()
    config = get_config()
    setup_logging(config.log_level.value)

    app = TapirApplication(config)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: app.handle_signal(s))

    await app.initialize()
    await app.run()

def run():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    run()
