from flask import Blueprint

# Create blueprints
auth_bp = Blueprint('auth', __name__)
oauth_bp = Blueprint('oauth', __name__)

# Import routes after blueprints are created to avoid circular imports
from . import routes, oauth as oauth_routes  # noqa
