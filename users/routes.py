from flask import jsonify, current_app
from flasgger import swag_from

from auth.client import IdentityServiceError
from auth.identity import resolve_identity
from . import users_bp

@users_bp.route('/me', methods=['GET'])
@swag_from({
    'tags': ['Users'],
    'description': 'Get the signed-in user, or null when anonymous',
    'security': [{'SessionCookie': []}],
    'responses': {
        '200': {
            'description': 'User profile or null',
            'schema': {'$ref': '#/definitions/User'}
        }
    }
})
def get_current_user_profile():
    """Get the signed-in user's profile from the users service."""
    try:
        identity = resolve_identity()
    except IdentityServiceError as e:
        current_app.logger.warning(f'Could not resolve current user: {str(e)}')
        return jsonify(None)

    return jsonify(None if identity.is_anonymous else identity.user)
