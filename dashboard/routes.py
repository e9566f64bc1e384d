from flask import jsonify, current_app, render_template
from flasgger import swag_from
from sqlalchemy.exc import SQLAlchemyError

from auth.identity import resolve_identity, with_identity
from journal.analysis import Unavailable, generate_weekly_insight
from journal.store import list_entries, list_recent_entries
from .trends import build_trends
from . import dashboard_bp


@dashboard_bp.route('/')
def index():
    """Diary page: composition form, entry list, trend chart and weekly insight card."""
    return render_template(
        'index.html',
        min_entries=current_app.config['INSIGHT_MIN_ENTRIES'],
    )


@dashboard_bp.route('/api/insights/weekly')
@swag_from({
    'tags': ['Insights'],
    'description': 'One coaching observation about the last two weeks of entries. '
                   'Best effort: null whenever it cannot be produced.',
    'security': [{'SessionCookie': []}],
    'responses': {
        '200': {
            'description': 'Insight text or null',
            'schema': {
                'type': 'object',
                'properties': {
                    'insight': {'type': 'string', 'x-nullable': True}
                }
            }
        }
    }
})
def weekly_insight():
    """Generate the weekly insight; never fails the page."""
    try:
        identity = resolve_identity()
        entries = list_recent_entries(
            identity.user_id, days=current_app.config['INSIGHT_WINDOW_DAYS']
        )
        result = generate_weekly_insight(entries)
    except Exception as e:  # noqa: BLE001 – any failure means "no insight"
        current_app.logger.error(f'Error generating weekly insight: {str(e)}')
        result = Unavailable('request failed')

    if isinstance(result, Unavailable):
        current_app.logger.info(f'Weekly insight unavailable: {result.reason}')
    return jsonify(result.to_dict())


@dashboard_bp.route('/api/insights/trends')
@with_identity
@swag_from({
    'tags': ['Insights'],
    'description': 'Mood and stress series in chronological order, with averages',
    'security': [{'SessionCookie': []}],
    'responses': {
        '200': {
            'description': 'Trend series',
            'schema': {
                'type': 'object',
                'properties': {
                    'count': {'type': 'integer'},
                    'window': {'type': 'integer'},
                    'points': {
                        'type': 'array',
                        'items': {
                            'type': 'object',
                            'properties': {
                                'id': {'type': 'integer'},
                                'created_at': {'type': 'string', 'format': 'date-time'},
                                'day': {'type': 'string'},
                                'mood': {'type': 'string'},
                                'mood_score': {'type': 'integer'},
                                'stress': {'type': 'integer'}
                            }
                        }
                    },
                    'average_mood': {'type': 'number', 'x-nullable': True},
                    'average_stress': {'type': 'number', 'x-nullable': True},
                    'rolling_mood': {'type': 'array', 'items': {'type': 'number'}},
                    'rolling_stress': {'type': 'array', 'items': {'type': 'number'}}
                }
            }
        },
        '500': {'description': 'Database error', 'schema': {'$ref': '#/definitions/Error'}}
    }
})
def trends(identity):
    """Chart data for the caller's entries."""
    try:
        entries = list_entries(identity.user_id)
    except SQLAlchemyError as e:
        current_app.logger.error(f'Error fetching entries for trends: {str(e)}')
        return jsonify({'error': 'Failed to fetch entries'}), 500

    return jsonify(build_trends(entries, window=current_app.config['TREND_ROLLING_WINDOW']))
