"""
Local network discovery helpers for the OguWatcher relay.
Finds the LAN address for the startup banner and advertises the relay over mDNS
so camera devices can reach it by name.
"""

import socket

from zeroconf import ServiceInfo, Zeroconf

from ..log import get_logger

logger = get_logger("mDNS")

# mDNS advertisement state
_zeroconf = None
_service_info = None


def get_local_ip() -> str:
    """Best-effort non-loopback IPv4 address of this host"""
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # No packet is sent; connect() only selects the outbound interface
        probe.connect(("10.255.255.255", 1))
        address = probe.getsockname()[0]
    except OSError:
        return "localhost"
    finally:
        probe.close()
    if address.startswith("127."):
        return "localhost"
    return address


def get_hostname() -> str:
    return socket.gethostname().split(".")[0]


def build_service_info(service_type: str, port: int, https: bool, ip_address: str) -> ServiceInfo:
    """Describe the relay as an mDNS service"""
    hostname = get_hostname()
    scheme = "https" if https else "http"
    properties = {
        "scheme": scheme,
        "camera_path": "/camera",
        "viewer_path": "/viewer",
        "ws_path": "/ws",
    }
    return ServiceInfo(
        service_type,
        f"OguWatcher on {hostname}.{service_type}",
        addresses=[socket.inet_aton(ip_address)],
        port=port,
        properties=properties,
        server=f"{hostname}.local.",
    )


def start_advertising(service_type: str, port: int, https: bool = False) -> bool:
    """Register the relay on the local network"""
    global _zeroconf, _service_info

    ip_address = get_local_ip()
    if ip_address == "localhost":
        logger.warning("No LAN address found, skipping mDNS advertisement")
        return False

    try:
        _service_info = build_service_info(service_type, port, https, ip_address)
        _zeroconf = Zeroconf()
        _zeroconf.register_service(_service_info)
    except Exception as e:
        logger.warning(f"mDNS advertisement failed: {e}")
        stop_advertising()
        return False

    logger.info(f"Advertising {_service_info.name} at {ip_address}:{port}")
    return True


def stop_advertising():
    """Withdraw the mDNS advertisement"""
    global _zeroconf, _service_info
    if _zeroconf:
        if _service_info:
            try:
                _zeroconf.unregister_service(_service_info)
            except Exception as e:
                logger.debug(f"mDNS unregister failed: {e}")
        _zeroconf.close()
        logger.info("Advertisement stopped")
    _zeroconf = None
    _service_info = None
