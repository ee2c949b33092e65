"""
WebSocket endpoint for the OguWatcher relay.
Each connection runs its receive loop on its own server thread.
"""
from flask import Blueprint, current_app
from flask_sock import Sock
from simple_websocket import ConnectionClosed

from ..log import get_logger
from ..security import get_client_ip

logger = get_logger('WebSocket')

ws_bp = Blueprint('ws', __name__)
sock = Sock()


def get_relay():
    """Get the dispatcher owned by the current app"""
    return current_app.extensions['oguwatcher']


def relay_socket(ws):
    """Feed every inbound frame to the dispatcher until the socket closes"""
    dispatcher = get_relay()
    connection = dispatcher.open_connection(ws, get_client_ip())
    try:
        while True:
            message = ws.receive()
            if message is not None:
                dispatcher.handle_message(connection, message)
    except ConnectionClosed as e:
        logger.debug(f"Connection #{connection.id} closed ({e.reason})")
    except Exception as e:
        logger.error(f"Connection #{connection.id} transport error: {e}")
    finally:
        dispatcher.close_connection(connection)


# Sock.route() registers the wrapped view and returns None, so keep the
# handler bound by registering it explicitly
sock.route('/ws', bp=ws_bp)(relay_socket)
