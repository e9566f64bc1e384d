from flask import Blueprint

# Create blueprint
dashboard_bp = Blueprint('dashboard', __name__, template_folder='templates')

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
