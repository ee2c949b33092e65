"""
API routes for the OguWatcher relay.
Read-only JSON views of the registry.
"""

from flask import Blueprint, jsonify

from .ws import get_relay

api_bp = Blueprint("api", __name__)


@api_bp.route("/health")
def health_check():
    """Health check endpoint for system monitoring"""
    return jsonify({"status": "healthy", "service": "OguWatcher Relay"})


@api_bp.route("/cameras")
def get_cameras():
    """Get all registered cameras"""
    cameras = get_relay().registry.list_cameras()
    return jsonify({"cameras": cameras, "count": len(cameras)})


@api_bp.route("/status")
def get_status():
    """Get connection counts"""
    cameras, viewers = get_relay().registry.counts()
    return jsonify({"cameras": cameras, "viewers": viewers})
