from flask import Blueprint, request

bp = Blueprint('main', __name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}

# The public API is called from browser frontends on other origins
@bp.after_app_request
def add_cors_headers(response):
    if request.path.startswith('/api/'):
        response.headers.update(CORS_HEADERS)
    return response

# Import routes and forms at the bottom
from payhub.main import routes, forms
