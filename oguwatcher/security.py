"""
Response headers and request helpers for the OguWatcher relay.
"""
from flask import current_app, request


def add_response_headers(response):
    """Add CORS and browser permission headers to every response"""
    response.headers['Access-Control-Allow-Origin'] = current_app.config.get('CORS_ALLOW_ORIGIN', '*')
    response.headers['Access-Control-Allow-Methods'] = 'GET, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type'

    # Prevent MIME type sniffing
    response.headers['X-Content-Type-Options'] = 'nosniff'

    # Capture pages need the camera and microphone on this origin only
    response.headers['Permissions-Policy'] = 'geolocation=(), microphone=(self), camera=(self)'

    return response


def get_client_ip() -> str:
    """Get client IP from request"""
    if request.headers.get('X-Forwarded-For'):
        return request.headers.get('X-Forwarded-For').split(',')[0].strip()
    elif request.headers.get('X-Real-IP'):
        return request.headers.get('X-Real-IP')
    return request.remote_addr or '127.0.0.1'
