from flask_sqlalchemy import SQLAlchemy
from flasgger import Swagger
from auth.client import UsersServiceClient

# Initialize extensions
db = SQLAlchemy()
users_service = UsersServiceClient()

# Configure Swagger
swagger = Swagger(
    template={
        "swagger": "2.0",
        "info": {
            "title": "Diary API",
            "description": "API for the AI-assisted diary: entries, mood analysis and weekly insights",
            "version": "1.0.0"
        },
        "securityDefinitions": {
            "SessionCookie": {
                "type": "apiKey",
                "name": "diary_session_token",
                "in": "cookie",
                "description": "Session token set by POST /api/sessions. Optional: without it requests act on the anonymous diary."
            }
        },
        "schemes": ["http", "https"],
        "consumes": ["application/json"],
        "produces": ["application/json"],
        "definitions": {
            "DiaryEntry": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "format": "int64"},
                    "content": {"type": "string"},
                    "mood": {
                        "type": "string",
                        "enum": ["happy", "sad", "anxious", "calm", "excited",
                                 "frustrated", "peaceful", "stressed", "neutral"]
                    },
                    "stress": {"type": "integer", "minimum": 1, "maximum": 10},
                    "ai_insights": {"type": "string"},
                    "user_id": {"type": "string", "x-nullable": True},
                    "user_mood_rating": {"type": "integer", "minimum": 1, "maximum": 10, "x-nullable": True},
                    "created_at": {"type": "string", "format": "date-time"},
                    "updated_at": {"type": "string", "format": "date-time"}
                }
            },
            "User": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "email": {"type": "string", "format": "email"}
                }
            },
            "Error": {
                "type": "object",
                "properties": {
                    "error": {"type": "string", "description": "Error message"}
                }
            },
            "Success": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean"}
                }
            }
        }
    },
    config={
        "headers": [],
        "specs": [
            {
                "endpoint": 'apispec',
                "route": '/apispec.json',
                "rule_filter": lambda rule: True,
                "model_filter": lambda tag: True,
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/apidocs/"
    }
)

def init_app(app):
    """Initialize all extensions with the app."""
    db.init_app(app)
    users_service.init_app(app)
    # Swagger documents whichever cookie this app actually reads.
    swagger.template["securityDefinitions"]["SessionCookie"]["name"] = app.config["SESSION_TOKEN_COOKIE_NAME"]
    swagger.init_app(app)
