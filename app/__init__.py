from flask import Flask, jsonify
from app.config import Config


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    from app.extensions import db, init_app
    init_app(app)

    # Register blueprints
    from auth import auth_bp, oauth_bp
    from auth.client import IdentityServiceError
    from journal import journal_bp
    from users import users_bp
    from dashboard import dashboard_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(oauth_bp, url_prefix='/api/oauth')
    app.register_blueprint(journal_bp, url_prefix='/api/entries')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(dashboard_bp)

    @app.errorhandler(IdentityServiceError)
    def identity_service_error(e):
        app.logger.error(f'Users service error: {str(e)}')
        return jsonify({'error': 'Could not reach the sign-in service. Please try again.'}), 500

    # Create tables
    with app.app_context():
        from journal.models import DiaryEntry  # noqa: F401
        db.create_all()

    return app
