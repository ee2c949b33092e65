"""
Route blueprints for the OguWatcher relay.
"""
from .main import main_bp
from .api import api_bp
from .ws import ws_bp, sock
