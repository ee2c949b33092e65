import socket

from oguwatcher.services import discovery


def test_get_local_ip_is_ipv4_or_localhost() -> None:
    address = discovery.get_local_ip()
    if address != "localhost":
        socket.inet_aton(address)
        assert not address.startswith("127.")


def test_service_info_describes_relay() -> None:
    service_type = "_oguwatcher._tcp.local."
    info = discovery.build_service_info(service_type, 8443, True, "192.168.1.20")

    assert info.type == service_type
    assert info.name.endswith("." + service_type)
    assert info.port == 8443
    assert info.server == f"{discovery.get_hostname()}.local."
    assert info.addresses == [socket.inet_aton("192.168.1.20")]
    assert info.properties[b"scheme"] == b"https"
    assert info.properties[b"ws_path"] == b"/ws"


def test_stop_without_start_is_harmless() -> None:
    discovery.stop_advertising()
    discovery.stop_advertising()
