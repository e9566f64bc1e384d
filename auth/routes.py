from flask import request, jsonify, current_app
from flasgger import swag_from

from . import auth_bp
from .client import IdentityServiceError
from .identity import get_session_token, get_users_service


def _set_session_cookie(response, value, max_age):
    response.set_cookie(
        current_app.config['SESSION_TOKEN_COOKIE_NAME'],
        value,
        max_age=max_age,
        path='/',
        secure=True,
        httponly=True,
        samesite='None',
    )
    return response


@auth_bp.route('/sessions', methods=['POST'])
@swag_from({
    'tags': ['Authentication'],
    'description': 'Exchange an OAuth authorization code for a session cookie',
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'code': {'type': 'string', 'example': '4/0AX4XfWh...'}
            },
            'required': ['code']
        }
    }],
    'responses': {
        '200': {
            'description': 'Session cookie set',
            'schema': {'$ref': '#/definitions/Success'}
        },
        '400': {'description': 'No authorization code provided', 'schema': {'$ref': '#/definitions/Error'}},
        '500': {'description': 'Users service error', 'schema': {'$ref': '#/definitions/Error'}}
    }
})
def create_session():
    """Exchange the OAuth code for a session token and store it in a cookie."""
    data = request.get_json(silent=True) or {}
    code = data.get('code') if isinstance(data, dict) else None

    if not code:
        return jsonify({'error': 'No authorization code provided'}), 400

    session_token = get_users_service().exchange_code_for_session_token(code)

    response = jsonify({'success': True})
    max_age = int(current_app.config['SESSION_TOKEN_MAX_AGE'].total_seconds())
    return _set_session_cookie(response, session_token, max_age), 200


@auth_bp.route('/logout')
@swag_from({
    'tags': ['Authentication'],
    'description': 'Log out: revoke the session and clear the cookie',
    'security': [{'SessionCookie': []}],
    'responses': {
        '200': {
            'description': 'Successfully logged out',
            'schema': {'$ref': '#/definitions/Success'}
        }
    }
})
def logout():
    """
    Revoke the current session at the users service and clear the cookie.
    The cookie is cleared even if the users service cannot be reached.
    """
    session_token = get_session_token()
    if session_token:
        try:
            get_users_service().delete_session(session_token)
        except IdentityServiceError as e:
            current_app.logger.warning(f'Failed to revoke session at users service: {str(e)}')

    response = jsonify({'success': True})
    return _set_session_cookie(response, '', 0), 200
