"""
Configuration classes for the OguWatcher relay.
"""
import os


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == 'true'


class Config:
    """Base configuration class"""

    # Network
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8080'))
    DEBUG = _env_flag('DEBUG', 'false')
    TESTING = False

    # HTTPS (certificate files are looked up relative to the working directory)
    HTTPS_ENABLED = _env_flag('HTTPS_ENABLED', 'false')
    HTTPS_PORT = int(os.environ.get('HTTPS_PORT', '8443'))
    SSL_CERT_FILE = os.environ.get('SSL_CERT_FILE', 'certificate.pem')
    SSL_KEY_FILE = os.environ.get('SSL_KEY_FILE', 'private-key.pem')

    # Relay
    STATUS_LOG_INTERVAL = int(os.environ.get('STATUS_LOG_INTERVAL', '30'))  # 0 disables
    WS_PING_INTERVAL = int(os.environ.get('WS_PING_INTERVAL', '25'))
    SOCK_SERVER_OPTIONS = {'ping_interval': WS_PING_INTERVAL}

    # CORS
    CORS_ALLOW_ORIGIN = os.environ.get('CORS_ALLOW_ORIGIN', '*')

    # mDNS
    MDNS_ENABLED = _env_flag('MDNS_ENABLED', 'true')
    MDNS_SERVICE_TYPE = '_oguwatcher._tcp.local.'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    LOG_DIR = os.environ.get('LOG_DIR')

    @classmethod
    def listen_port(cls, https: bool) -> int:
        """Port the server binds for the chosen scheme"""
        return cls.HTTPS_PORT if https else cls.PORT


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


class TestingConfig(Config):
    """Configuration used by the test suite"""
    TESTING = True
    MDNS_ENABLED = False
    STATUS_LOG_INTERVAL = 0
    LOG_DIR = None
