from flask import Blueprint, jsonify

misc_bp = Blueprint('misc', __name__)

@misc_bp.route('/health')
def health_check():
    """Health check endpoint for monitoring and testing."""
    return jsonify({'status': 'healthy'}), 200
