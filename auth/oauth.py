from flask import jsonify
from flasgger import swag_from

from . import oauth_bp
from .identity import get_users_service


@oauth_bp.route('/google/redirect_url')
@swag_from({
    'tags': ['OAuth'],
    'description': 'Get the Google OAuth consent screen URL',
    'responses': {
        '200': {
            'description': 'URL the browser should be redirected to',
            'schema': {
                'type': 'object',
                'properties': {
                    'redirectUrl': {'type': 'string'}
                }
            }
        },
        '500': {'description': 'Users service error', 'schema': {'$ref': '#/definitions/Error'}}
    }
})
def google_redirect_url():
    """
    Ask the users service where to send the browser for Google sign-in.
    This is the first step in the OAuth flow; the callback page then posts
    the returned code to /api/sessions.
    """
    redirect_url = get_users_service().get_oauth_redirect_url('google')
    return jsonify({'redirectUrl': redirect_url}), 200
