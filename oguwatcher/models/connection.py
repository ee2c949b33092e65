"""
Per-participant connection state for the OguWatcher relay.
"""
import itertools
from enum import Enum

from .outbox import Outbox

_connection_ids = itertools.count(1)


class Role(Enum):
    UNREGISTERED = 'unregistered'
    CAMERA = 'camera'
    VIEWER = 'viewer'
    CLOSED = 'closed'


class PayloadKind(Enum):
    """What the next binary frame on a connection carries"""
    VIDEO = 'video'
    AUDIO_FROM_CAMERA = 'audio-from-camera'
    AUDIO_FROM_PC = 'audio-from-pc'


class PendingPayload:
    """Descriptor armed by a control message, consumed by the next binary frame"""

    __slots__ = ('kind', 'camera_id')

    def __init__(self, kind: PayloadKind, camera_id: str):
        self.kind = kind
        # Source camera for video/audio-from-camera, talkback target for audio-from-pc
        self.camera_id = camera_id

    def __eq__(self, other):
        if not isinstance(other, PendingPayload):
            return NotImplemented
        return (self.kind, self.camera_id) == (other.kind, other.camera_id)

    def __repr__(self):
        return f'<PendingPayload {self.kind.value} {self.camera_id}>'


class Connection:
    """
    Wraps one WebSocket to a camera or viewer.

    Frames from one connection are handled on a single thread, so role and
    pending state are only touched by that thread. Outbound frames from any
    thread go through the connection's Outbox, whose writer thread is the only
    one that writes to the socket.
    """

    def __init__(self, ws, remote_addr: str = None):
        self.ws = ws
        self.id = next(_connection_ids)
        self.remote_addr = remote_addr or '-'
        self.role = Role.UNREGISTERED
        self.camera_id = None
        self.outbox = Outbox(ws, owner=self)
        self._pending = None

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def become_camera(self, camera_id: str):
        self.role = Role.CAMERA
        self.camera_id = camera_id

    def become_viewer(self):
        self.role = Role.VIEWER
        self.camera_id = None

    def close(self) -> Role:
        """Mark closed, drop any pending descriptor and unsent output. Returns the previous role."""
        previous = self.role
        self.role = Role.CLOSED
        self._pending = None
        self.outbox.close()
        return previous

    @property
    def closed(self) -> bool:
        return self.role is Role.CLOSED

    def is_open(self) -> bool:
        """Check the transport is still writable"""
        return not self.closed and not self.outbox.closed and bool(getattr(self.ws, 'connected', False))

    # ------------------------------------------------------------------
    # Pending payload descriptor
    # ------------------------------------------------------------------

    def arm(self, pending: PendingPayload):
        """Set the descriptor for the next binary frame, replacing any unconsumed one"""
        self._pending = pending

    def disarm(self):
        self._pending = None

    def take_pending(self):
        """Read and clear the pending descriptor"""
        pending, self._pending = self._pending, None
        return pending

    @property
    def pending(self):
        return self._pending

    # ------------------------------------------------------------------
    # Output (never blocks the caller)
    # ------------------------------------------------------------------

    def post_media(self, parts) -> bool:
        return self.outbox.post_media(parts)

    def post_camera_list(self, version: int, message: str) -> bool:
        return self.outbox.post_camera_list(version, message)

    @property
    def label(self) -> str:
        if self.role is Role.CAMERA:
            return f'camera {self.camera_id} #{self.id} ({self.remote_addr})'
        return f'{self.role.value} #{self.id} ({self.remote_addr})'

    def __repr__(self):
        return f'<Connection {self.label}>'
