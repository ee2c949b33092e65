"""
Inbound frame routing for the OguWatcher relay.

Text frames are control messages that change connection/registry state or
arm the connection's pending payload descriptor. Binary frames consume that
descriptor and are forwarded according to it.
"""
from ..log import get_logger
from ..models.connection import Connection, PayloadKind, PendingPayload, Role
from ..models.messages import (
    MalformedMessage,
    MessageType,
    camera_audio_announcement,
    parse_control,
    talkback_announcement,
    video_announcement,
)

logger = get_logger('Relay')

# Payload control messages and the field naming the camera they concern
_PAYLOAD_CONTROLS = {
    MessageType.VIDEO: (PayloadKind.VIDEO, 'cameraId'),
    MessageType.AUDIO_FROM_CAMERA: (PayloadKind.AUDIO_FROM_CAMERA, 'cameraId'),
    MessageType.AUDIO_FROM_PC: (PayloadKind.AUDIO_FROM_PC, 'targetCameraId'),
}


class Dispatcher:
    """Routes frames between cameras and viewers"""

    def __init__(self, registry, broadcaster):
        self.registry = registry
        self.broadcaster = broadcaster
        self._control_handlers = {
            MessageType.CAMERA_INIT: self._on_camera_init,
            MessageType.VIEWER_INIT: self._on_viewer_init,
            MessageType.VIDEO: self._on_payload_control,
            MessageType.AUDIO_FROM_CAMERA: self._on_payload_control,
            MessageType.AUDIO_FROM_PC: self._on_payload_control,
        }
        self._payload_handlers = {
            PayloadKind.VIDEO: self._route_video,
            PayloadKind.AUDIO_FROM_CAMERA: self._route_camera_audio,
            PayloadKind.AUDIO_FROM_PC: self._route_talkback,
        }

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def open_connection(self, ws, remote_addr: str = None) -> Connection:
        connection = Connection(ws, remote_addr)
        logger.info(f"New connection #{connection.id} from {connection.remote_addr}")
        return connection

    def close_connection(self, connection: Connection):
        """Evict a connection from the registry. Safe to call more than once."""
        previous = connection.close()
        if previous is Role.CAMERA:
            record = self.registry.remove_camera(connection.camera_id, connection)
            if record is not None:
                logger.info(f"Camera disconnected: {record.name} ({record.camera_id})")
                self.broadcaster.broadcast_camera_list()
            else:
                logger.info(f"Camera connection #{connection.id} closed (id {connection.camera_id} already taken over)")
        elif previous is Role.VIEWER:
            self.registry.remove_viewer(connection)
            logger.info(f"Viewer disconnected #{connection.id}")
        elif previous is Role.UNREGISTERED:
            logger.debug(f"Unregistered connection #{connection.id} closed")

    # ------------------------------------------------------------------
    # Inbound frames
    # ------------------------------------------------------------------

    def handle_message(self, connection: Connection, message):
        """Handle one inbound frame (str = control, bytes = payload)"""
        if connection.closed:
            return
        try:
            if isinstance(message, str):
                self.handle_control(connection, message)
            else:
                self.handle_payload(connection, message)
        except Exception as e:
            logger.error(f"Error handling message from {connection.label}: {e}", exc_info=True)

    def handle_control(self, connection: Connection, text: str):
        try:
            message = parse_control(text)
        except MalformedMessage as e:
            logger.warning(f"Malformed control message from {connection.label}: {e}")
            return

        handler = self._control_handlers.get(message.type)
        if handler is None:
            logger.debug(f"Ignoring unknown message type {message.raw_type!r} from {connection.label}")
            return

        try:
            handler(connection, message)
        except MalformedMessage as e:
            logger.warning(f"Malformed control message from {connection.label}: {e}")

    def handle_payload(self, connection: Connection, data: bytes) -> int:
        """Route a binary frame using the connection's pending descriptor"""
        pending = connection.take_pending()
        if pending is None:
            logger.debug(f"Dropped {len(data)} byte frame from {connection.label}: nothing pending")
            return 0
        return self._payload_handlers[pending.kind](pending, data)

    # ------------------------------------------------------------------
    # Control handlers
    # ------------------------------------------------------------------

    def _on_camera_init(self, connection: Connection, message):
        camera_id = message.require_id('cameraId')
        name = message.optional_str('name') or camera_id

        if connection.role is Role.VIEWER:
            self.registry.remove_viewer(connection)
        elif connection.role is Role.CAMERA and connection.camera_id != camera_id:
            self.registry.remove_camera(connection.camera_id, connection)

        self.registry.upsert_camera(camera_id, name, connection)
        connection.become_camera(camera_id)
        logger.info(f"Camera connected: {name} ({camera_id})")
        self.broadcaster.broadcast_camera_list()

    def _on_viewer_init(self, connection: Connection, message):
        released = None
        if connection.role is Role.CAMERA:
            released = self.registry.remove_camera(connection.camera_id, connection)

        added = self.registry.add_viewer(connection)
        connection.become_viewer()
        if added:
            logger.info(f"Viewer connected #{connection.id} ({connection.remote_addr})")

        if released is not None:
            self.broadcaster.broadcast_camera_list()
        else:
            self.broadcaster.send_camera_list(connection)

    def _on_payload_control(self, connection: Connection, message):
        kind, field = _PAYLOAD_CONTROLS[message.type]
        try:
            camera_id = message.require_id(field)
        except MalformedMessage:
            # Never let the next frame fall through to an older descriptor
            connection.disarm()
            raise
        connection.arm(PendingPayload(kind, camera_id))

    # ------------------------------------------------------------------
    # Payload routes
    # ------------------------------------------------------------------

    def _route_video(self, pending: PendingPayload, frame: bytes) -> int:
        if self.registry.update_last_frame(pending.camera_id, frame) is None:
            logger.debug(f"Dropped video frame for unknown camera {pending.camera_id}")
            return 0
        return self.broadcaster.relay_to_viewers([video_announcement(pending.camera_id), frame])

    def _route_camera_audio(self, pending: PendingPayload, clip: bytes) -> int:
        return self.broadcaster.relay_to_viewers([camera_audio_announcement(pending.camera_id), clip])

    def _route_talkback(self, pending: PendingPayload, clip: bytes) -> int:
        camera = self.registry.lookup_camera(pending.camera_id)
        if camera is None or not camera.connection.is_open():
            logger.debug(f"Dropped talkback clip for unavailable camera {pending.camera_id}")
            return 0
        return self.broadcaster.relay([talkback_announcement(), clip], [camera.connection])
