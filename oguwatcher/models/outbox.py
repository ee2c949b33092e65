"""
Per-connection writer for the OguWatcher relay.

Each connection gets one writer thread and two single-slot mailboxes: the
latest camera list and the latest media group (announcement + payload). A
newer item replaces an unsent one, so a viewer that stops reading loses frames
instead of holding up the thread that produced them.
"""
import threading

from ..log import get_logger

logger = get_logger('Outbox')


class Outbox:
    """Latest-wins mailboxes drained by a lazily started writer thread"""

    def __init__(self, ws, owner=None):
        self.ws = ws
        self.owner = owner
        self.list_version = -1  # last camera-list version written
        self.dropped = 0
        self._cond = threading.Condition()
        self._camera_list = None  # (version, message)
        self._media = None  # list of frames, written back to back
        self._writing = False
        self._closed = False
        self._thread = None

    @property
    def label(self) -> str:
        return self.owner.label if self.owner is not None else repr(self.ws)

    def post_camera_list(self, version: int, message: str) -> bool:
        """Queue a camera list unless a newer one was already written or queued"""
        with self._cond:
            if self._closed:
                return False
            newest = self._camera_list[0] if self._camera_list else self.list_version
            if version < newest:
                return False
            self._camera_list = (version, message)
            self._wake()
            return True

    def post_media(self, parts) -> bool:
        """Queue a media group, replacing any group not yet being written"""
        with self._cond:
            if self._closed:
                return False
            if self._media is not None:
                self.dropped += 1
                logger.debug(f"Replaced unsent frame for {self.label} ({self.dropped} dropped)")
            self._media = list(parts)
            self._wake()
            return True

    def flush(self, timeout: float = None) -> bool:
        """Wait until nothing is queued or being written"""
        with self._cond:
            return self._cond.wait_for(
                lambda: self._closed or not (self._writing or self._camera_list or self._media),
                timeout,
            )

    def close(self):
        """Stop the writer and discard anything unsent"""
        with self._cond:
            self._closed = True
            self._camera_list = None
            self._media = None
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    def _wake(self):
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name=f'outbox-{self.label}', daemon=True)
            self._thread.start()
        self._cond.notify_all()

    def _take(self):
        """Next item to write; camera lists go first. None once closed."""
        with self._cond:
            self._cond.wait_for(lambda: self._closed or self._camera_list or self._media)
            if self._closed:
                return None
            self._writing = True
            if self._camera_list is not None:
                item, self._camera_list = self._camera_list, None
                return item[0], [item[1]]
            item, self._media = self._media, None
            return None, item

    def _run(self):
        while True:
            item = self._take()
            if item is None:
                return
            version, parts = item
            try:
                for part in parts:
                    self.ws.send(part)
            except Exception as e:
                logger.warning(f"Send to {self.label} failed: {e}")
                self.close()
            with self._cond:
                self._writing = False
                if version is not None and version > self.list_version:
                    self.list_version = version
                self._cond.notify_all()
