"""
Periodic connection status log for the OguWatcher relay.
"""
import threading

from ..log import get_logger

logger = get_logger('Status')


class StatusReporter:
    """Logs registry sizes at a fixed interval from a background thread"""

    def __init__(self, registry, interval: float = 30):
        self.registry = registry
        self.interval = interval
        self.thread = None
        self._stop_event = threading.Event()

    def report_once(self):
        cameras, viewers = self.registry.counts()
        logger.info(f"Connections - cameras: {cameras} / viewers: {viewers}")
        return cameras, viewers

    def start(self):
        """Start the reporting thread"""
        if self.interval <= 0:
            logger.info("Status reporting disabled")
            return
        if self.thread and self.thread.is_alive():
            return
        self._stop_event.clear()
        self.thread = threading.Thread(target=self._run, name='status-reporter', daemon=True)
        self.thread.start()
        logger.debug(f"Status reporter started (every {self.interval}s)")

    def stop(self):
        """Stop the reporting thread"""
        self._stop_event.set()
        if self.thread:
            self.thread.join(timeout=2)
            self.thread = None

    def _run(self):
        while not self._stop_event.wait(self.interval):
            self.report_once()
