"""
OguWatcher relay - Flask Application Factory
"""
from flask import Flask

from .config import Config
from .log import configure_logging, get_logger
from .models.registry import Registry
from .security import add_response_headers
from .services.broadcaster import Broadcaster
from .services.dispatcher import Dispatcher


def create_app(config_class=Config):
    """Application factory pattern for Flask app creation"""
    app = Flask(__name__,
                static_folder='static',
                template_folder='templates')

    # Load configuration
    app.config.from_object(config_class)

    configure_logging(app)

    # One registry per app; every connection handler shares it
    registry = Registry()
    broadcaster = Broadcaster(registry)
    app.extensions['oguwatcher'] = Dispatcher(registry, broadcaster)

    # CORS and permission headers on all responses
    app.after_request(add_response_headers)

    # Register blueprints
    from .routes import main_bp, api_bp, ws_bp, sock
    sock.init_app(app)
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(ws_bp)

    get_logger('System').debug(f"App created with {config_class.__name__}")
    return app
