"""
Control protocol for the OguWatcher relay.

Text frames carry JSON objects with a mandatory ``type`` field. Binary frames
carry no header: their meaning comes from the control message that preceded
them on the same connection.
"""
import json
from enum import Enum


class MessageType(str, Enum):
    """Known control message types"""

    CAMERA_INIT = 'camera-init'
    VIEWER_INIT = 'viewer-init'
    VIDEO = 'video'
    AUDIO_FROM_CAMERA = 'audio-from-camera'
    AUDIO_FROM_PC = 'audio-from-pc'
    CAMERA_LIST = 'camera-list'

    @classmethod
    def lookup(cls, value):
        """Return the member for a wire value, or None when unknown"""
        try:
            return cls(value)
        except ValueError:
            return None


class MalformedMessage(ValueError):
    """Raised when a text frame is not a usable control message"""


class ControlMessage:
    """A parsed inbound control message"""

    def __init__(self, type_: MessageType, raw_type, fields: dict):
        self.type = type_
        self.raw_type = raw_type
        self.fields = fields

    def require_id(self, key: str) -> str:
        """Get a mandatory non-empty string field"""
        value = self.fields.get(key)
        if not isinstance(value, str) or not value:
            raise MalformedMessage(f"'{self.raw_type}' message without a valid '{key}'")
        return value

    def optional_str(self, key: str):
        value = self.fields.get(key)
        return value if isinstance(value, str) and value else None

    def __repr__(self):
        return f'<ControlMessage {self.raw_type}>'


def parse_control(text: str) -> ControlMessage:
    """
    Parse a text frame into a ControlMessage.
    Unknown types parse fine (type is None); the caller decides to ignore them.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedMessage(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedMessage(f"expected a JSON object, got {type(data).__name__}")
    if 'type' not in data:
        raise MalformedMessage("missing 'type' field")

    raw_type = data['type']
    return ControlMessage(MessageType.lookup(raw_type), raw_type, data)


def encode(payload: dict) -> str:
    """Encode an outbound control message as compact JSON"""
    return json.dumps(payload, separators=(',', ':'), ensure_ascii=False)


def camera_list_message(cameras) -> str:
    return encode({'type': MessageType.CAMERA_LIST.value, 'cameras': list(cameras)})


def video_announcement(camera_id: str) -> str:
    return encode({'type': MessageType.VIDEO.value, 'cameraId': camera_id})


def camera_audio_announcement(camera_id: str) -> str:
    return encode({'type': MessageType.AUDIO_FROM_CAMERA.value, 'cameraId': camera_id})


def talkback_announcement() -> str:
    return encode({'type': MessageType.AUDIO_FROM_PC.value})
