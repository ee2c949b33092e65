#!/usr/bin/env python3
"""
OguWatcher relay - Entry Point
"""
import os
import ssl
import signal
import atexit
from dotenv import load_dotenv

# Load environment variables before importing app
load_dotenv()

from oguwatcher import create_app
from oguwatcher.config import Config
from oguwatcher.services import discovery
from oguwatcher.services.status import StatusReporter


def load_ssl_context(cert_file: str, key_file: str):
    """Build a TLS server context, or None when the certificate files are missing"""
    if not (os.path.exists(cert_file) and os.path.exists(key_file)):
        return None
    ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    ssl_context.load_cert_chain(cert_file, key_file)
    return ssl_context


def print_banner(scheme: str, port: int):
    """Print the URLs operators open on the camera device and the PC"""
    local_ip = discovery.get_local_ip()
    hostname = discovery.get_hostname()
    line = '━' * 40
    print(line)
    print('        📹 OguWatcher' + (' (HTTPS)' if scheme == 'https' else ''))
    print(line)
    print()
    print('[Camera device] open one of:')
    print(f'   {scheme}://{hostname}.local:{port}/camera')
    print(f'   {scheme}://{local_ip}:{port}/camera')
    if scheme == 'http':
        print('   (browsers only allow camera access over HTTPS or on localhost-like names)')
    else:
        print('   (self-signed certificate: accept the browser warning once)')
    print()
    print('[PC viewer]')
    print(f'   {scheme}://{local_ip}:{port}/viewer')
    print(line)
    print()


def main():
    """Main entry point"""
    app = create_app()

    ssl_context = None
    if Config.HTTPS_ENABLED:
        ssl_context = load_ssl_context(Config.SSL_CERT_FILE, Config.SSL_KEY_FILE)
        if ssl_context is None:
            print("[Server] ⚠️  WARNING: HTTPS enabled but certificates not found!")
            print("[Server] ⚠️  Falling back to HTTP")

    https = ssl_context is not None
    port = Config.listen_port(https)

    # Start background services
    reporter = StatusReporter(app.extensions['oguwatcher'].registry, Config.STATUS_LOG_INTERVAL)
    reporter.start()
    if Config.MDNS_ENABLED:
        discovery.start_advertising(Config.MDNS_SERVICE_TYPE, port, https)

    def cleanup():
        """Graceful shutdown - stop all services"""
        print("\n[System] Shutting down...")
        reporter.stop()
        discovery.stop_advertising()
        print("[System] Shutdown complete")

    atexit.register(cleanup)
    signal.signal(signal.SIGINT, lambda s, f: exit(0))
    signal.signal(signal.SIGTERM, lambda s, f: exit(0))

    if Config.DEBUG:
        print("[Server] ⚠️  WARNING: Debug mode is ENABLED (not for production!)")

    print_banner('https' if https else 'http', port)
    app.run(host=Config.HOST, port=port, debug=Config.DEBUG, threaded=True,
            use_reloader=False, ssl_context=ssl_context)


if __name__ == '__main__':
    main()
