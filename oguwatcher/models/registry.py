"""
Camera and viewer registry for the OguWatcher relay.
"""
import threading
from ..log import get_logger

logger = get_logger('Registry')


class CameraRecord:
    """A registered camera and the connection that owns it"""

    __slots__ = ('camera_id', 'name', 'connection', 'last_frame')

    def __init__(self, camera_id: str, name: str, connection):
        self.camera_id = camera_id
        self.name = name
        self.connection = connection
        self.last_frame = None

    def to_dict(self) -> dict:
        return {'id': self.camera_id, 'name': self.name}

    def __repr__(self):
        return f'<CameraRecord {self.camera_id} "{self.name}">'


class Registry:
    """
    Process-wide camera map and viewer set.

    Every method holds the same lock, so readers never see a half-applied
    update. Each change to the camera map bumps ``version`` so camera-list
    snapshots can be ordered.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._cameras = {}
        self._viewers = set()
        self._version = 0

    # ------------------------------------------------------------------
    # Cameras
    # ------------------------------------------------------------------

    def upsert_camera(self, camera_id: str, name: str, connection) -> CameraRecord:
        """Register a camera, replacing any record with the same id"""
        record = CameraRecord(camera_id, name or camera_id, connection)
        with self._lock:
            previous = self._cameras.get(camera_id)
            self._cameras[camera_id] = record
            self._version += 1
        if previous is not None and previous.connection is not connection:
            logger.info(f"Camera {camera_id} re-registered by a new connection, replacing the old one")
        return record

    def remove_camera(self, camera_id: str, connection=None):
        """
        Remove a camera record. When a connection is given the record is only
        removed if that connection still owns it.
        """
        with self._lock:
            record = self._cameras.get(camera_id)
            if record is None:
                return None
            if connection is not None and record.connection is not connection:
                return None
            del self._cameras[camera_id]
            self._version += 1
            return record

    def lookup_camera(self, camera_id: str):
        with self._lock:
            return self._cameras.get(camera_id)

    def update_last_frame(self, camera_id: str, frame: bytes):
        """Cache the latest video frame. Returns the record, or None if unknown."""
        with self._lock:
            record = self._cameras.get(camera_id)
            if record is not None:
                record.last_frame = frame
            return record

    def list_cameras(self) -> list:
        with self._lock:
            return [record.to_dict() for record in self._cameras.values()]

    def camera_list_snapshot(self):
        """Get (version, cameras) taken atomically"""
        with self._lock:
            return self._version, [record.to_dict() for record in self._cameras.values()]

    # ------------------------------------------------------------------
    # Viewers
    # ------------------------------------------------------------------

    def add_viewer(self, connection) -> bool:
        """Add a viewer. Returns False if it was already registered."""
        with self._lock:
            if connection in self._viewers:
                return False
            self._viewers.add(connection)
            return True

    def remove_viewer(self, connection) -> bool:
        with self._lock:
            if connection not in self._viewers:
                return False
            self._viewers.discard(connection)
            return True

    def viewers(self) -> list:
        """Snapshot of the viewer set"""
        with self._lock:
            return list(self._viewers)

    # ------------------------------------------------------------------

    def counts(self):
        """Get (camera count, viewer count)"""
        with self._lock:
            return len(self._cameras), len(self._viewers)
