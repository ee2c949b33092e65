"""
Page routes for the OguWatcher relay.
Serves the camera capture page and the viewer page.
"""
from flask import Blueprint, redirect, render_template, url_for

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    return redirect(url_for('main.viewer'))


@main_bp.route('/viewer')
def viewer():
    """Camera grid with push-to-talk"""
    return render_template('viewer.html')


@main_bp.route('/camera')
@main_bp.route('/camera.html')
def camera():
    """Capture page run on the camera device"""
    return render_template('camera.html')
