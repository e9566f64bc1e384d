from flask import request, jsonify, current_app
from flasgger import swag_from
from sqlalchemy.exc import SQLAlchemyError

from auth.identity import with_identity
from .analysis import AnalysisConfigurationError, classify_entry
from .store import create_entry as store_entry, list_entries
from .validation import validate_entry_payload

# Create blueprint
from . import journal_bp

@journal_bp.route('', methods=['POST'])
@swag_from({
    'tags': ['Entries'],
    'description': 'Write a diary entry; it is analysed by the model before it is saved',
    'security': [{'SessionCookie': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'content': {'type': 'string', 'example': 'Today was an amazing day!'},
                'user_mood_rating': {'type': 'integer', 'minimum': 1, 'maximum': 10, 'example': 8}
            },
            'required': ['content']
        }
    }],
    'responses': {
        '201': {
            'description': 'Entry created',
            'schema': {'$ref': '#/definitions/DiaryEntry'}
        },
        '400': {'description': 'Invalid input', 'schema': {'$ref': '#/definitions/Error'}},
        '500': {'description': 'OpenAI key missing or entry could not be saved', 'schema': {'$ref': '#/definitions/Error'}}
    }
})
def create_entry():
    """Create a diary entry with mood, stress and AI insights."""
    payload, error = validate_entry_payload(request.get_json(silent=True))
    if error:
        return jsonify({'error': error}), 400

    return _analyse_and_store(payload)


@with_identity
def _analyse_and_store(payload, identity):
    # Nothing is written until the analysis is back.
    try:
        analysis = classify_entry(payload['content'])
        entry = store_entry(
            payload['content'],
            analysis,
            user_id=identity.user_id,
            user_mood_rating=payload['user_mood_rating'],
        )
    except AnalysisConfigurationError as e:
        current_app.logger.error(f'Entry rejected: {str(e)}')
        return jsonify({
            'error': 'OpenAI API key not configured. Please set OPENAI_API_KEY on the server.'
        }), 500
    except Exception as e:
        current_app.logger.error(f'Error creating entry: {str(e)}')
        return jsonify({'error': 'Failed to create entry. Please try again.'}), 500

    current_app.logger.info(f'Created entry {entry.id} (mood={entry.mood}, stress={entry.stress})')
    return jsonify(entry.to_dict()), 201


@journal_bp.route('', methods=['GET'])
@with_identity
@swag_from({
    'tags': ['Entries'],
    'description': 'List the caller\'s entries, newest first. Anonymous callers get the anonymous entries.',
    'security': [{'SessionCookie': []}],
    'responses': {
        '200': {
            'description': 'List of entries',
            'schema': {
                'type': 'array',
                'items': {'$ref': '#/definitions/DiaryEntry'}
            }
        },
        '500': {'description': 'Database error', 'schema': {'$ref': '#/definitions/Error'}}
    }
})
def get_entries(identity):
    """Get all entries in the caller's partition."""
    try:
        entries = list_entries(identity.user_id)
    except SQLAlchemyError as e:
        current_app.logger.error(f'Error fetching entries: {str(e)}')
        return jsonify({'error': 'Failed to fetch entries'}), 500

    return jsonify([entry.to_dict() for entry in entries])
