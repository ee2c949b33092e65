import json

import pytest

from oguwatcher.models import messages
from oguwatcher.models.messages import MalformedMessage, MessageType, parse_control


def test_parse_known_type() -> None:
    message = parse_control('{"type":"camera-init","cameraId":"cam1","name":"Room1"}')
    assert message.type is MessageType.CAMERA_INIT
    assert message.require_id("cameraId") == "cam1"
    assert message.optional_str("name") == "Room1"


def test_unknown_type_parses_without_member() -> None:
    message = parse_control('{"type":"ping"}')
    assert message.type is None
    assert message.raw_type == "ping"


def test_non_string_type_is_unknown() -> None:
    assert parse_control('{"type": 5}').type is None


@pytest.mark.parametrize(
    "text",
    ["not json", "{", "[1, 2]", '"camera-init"', '{"cameraId": "cam1"}'],
)
def test_malformed_text_raises(text: str) -> None:
    with pytest.raises(MalformedMessage):
        parse_control(text)


def test_require_id_rejects_missing_and_empty() -> None:
    message = parse_control('{"type":"video","cameraId":""}')
    with pytest.raises(MalformedMessage):
        message.require_id("cameraId")
    with pytest.raises(MalformedMessage):
        parse_control('{"type":"audio-from-pc"}').require_id("targetCameraId")


def test_optional_str_ignores_empty_and_non_strings() -> None:
    message = parse_control('{"type":"camera-init","cameraId":"c","name":""}')
    assert message.optional_str("name") is None
    message = parse_control('{"type":"camera-init","cameraId":"c","name":42}')
    assert message.optional_str("name") is None


def test_outbound_messages_are_compact_json() -> None:
    assert messages.video_announcement("cam1") == '{"type":"video","cameraId":"cam1"}'
    assert messages.camera_audio_announcement("cam1") == '{"type":"audio-from-camera","cameraId":"cam1"}'
    assert messages.talkback_announcement() == '{"type":"audio-from-pc"}'


def test_camera_list_message_keeps_non_ascii_names() -> None:
    encoded = messages.camera_list_message([{"id": "cam1", "name": "教室"}])
    assert "教室" in encoded
    assert json.loads(encoded) == {"type": "camera-list", "cameras": [{"id": "cam1", "name": "教室"}]}
