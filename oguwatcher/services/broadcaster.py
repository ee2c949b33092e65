"""
Fan-out of camera lists and media frames for the OguWatcher relay.
"""
from ..log import get_logger
from ..models.messages import camera_list_message

logger = get_logger('Broadcast')


class Broadcaster:
    """
    Hands frames to the outboxes of viewers (and of cameras, for talkback).

    Nothing here writes to a socket: each connection's writer thread does, so a
    viewer that stops reading never delays the camera thread calling in.
    """

    def __init__(self, registry):
        self.registry = registry

    def broadcast_camera_list(self) -> int:
        """Post the current camera list to every open viewer"""
        version, cameras = self.registry.camera_list_snapshot()
        message = camera_list_message(cameras)
        posted = 0
        for viewer in self.registry.viewers():
            if self._post_camera_list(viewer, version, message):
                posted += 1
        logger.debug(f"Camera list v{version} ({len(cameras)} cameras) posted to {posted} viewers")
        return posted

    def send_camera_list(self, viewer) -> bool:
        """Post the current camera list to a single viewer"""
        version, cameras = self.registry.camera_list_snapshot()
        return self._post_camera_list(viewer, version, camera_list_message(cameras))

    def _post_camera_list(self, viewer, version: int, message: str) -> bool:
        if not viewer.is_open():
            return False
        return viewer.post_camera_list(version, message)

    def relay(self, parts, targets) -> int:
        """
        Post parts, to be written in order and back to back, to each target.

        A target that has not finished writing its previous frame keeps only
        the newest one. Returns the number of targets that accepted the frame.
        """
        parts = list(parts)
        posted = 0
        for target in targets:
            if not target.is_open():
                continue
            try:
                if target.post_media(parts):
                    posted += 1
            except Exception as e:
                logger.warning(f"Could not hand frame to {target.label}: {e}")
        return posted

    def relay_to_viewers(self, parts) -> int:
        return self.relay(parts, self.registry.viewers())
