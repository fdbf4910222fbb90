# dogbook/__init__.py

# =====================================================================================
# 1. Environment variables (loaded before anything reads them)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Module imports
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from flask_cors import CORS
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials, firestore

# - configuration and security
from dogbook.core.config import config_by_name
from dogbook.core.exceptions import ApiError
from dogbook.core.security import init_jwt

# - API blueprints
from dogbook.api.auth.routes import auth_bp
from dogbook.api.dogs.routes import dogs_bp
from dogbook.api.posts.routes import posts_bp

# - services
from dogbook.services.storage_service import StorageService
from dogbook.api.auth.services import AuthService
from dogbook.api.dogs.services import DogService
from dogbook.api.posts.services import PostService


def _init_firebase(app: Flask):
    if firebase_admin._apps:
        return
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def create_app(config_name: str = None, db=None, bucket=None):
    """
    Flask application factory.

    ``db`` (a Firestore client) and ``bucket`` (a Storage bucket) can be passed
    in; when either is missing the Firebase app is initialized from the
    configured credentials and the real client/bucket are used.
    """
    # =====================================================================================
    # 3. Flask app and base configuration
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("JWT_SECRET_KEY must be set.")

    # =====================================================================================
    # 4. Extensions and external services
    # =====================================================================================
    init_jwt(app)
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config['CORS_ALLOWED_ORIGINS']}},
        methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    if db is None or bucket is None:
        _init_firebase(app)
    if db is None:
        db = firestore.client()

    # =====================================================================================
    # 5. Service instances, stored on app.services (dependency injection)
    # =====================================================================================
    app.services = {}

    try:
        storage_instance = StorageService()
        storage_instance.init_app(app, bucket=bucket)
        app.services['storage'] = storage_instance
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    auth_instance = AuthService(db=db)
    auth_instance.init_app(app)
    app.services['auth'] = auth_instance

    app.services['dogs'] = DogService(storage_service=app.services['storage'], db=db)
    app.services['posts'] = PostService(
        dog_service=app.services['dogs'],
        db=db,
        require_dog_ownership=app.config['POSTS_REQUIRE_DOG_OWNERSHIP']
    )

    # =====================================================================================
    # 6. Blueprints
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(dogs_bp, url_prefix='/api/dogs')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')

    @app.route('/')
    def index():
        return "Dogbook API working"

    # =====================================================================================
    # 7. Global error handlers
    # =====================================================================================
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"error_code": (err.name or "HTTP_ERROR").upper().replace(" ", "_"), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # Anything not handled above; internals are logged, not returned.
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "An unexpected server error occurred."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. Done
    # =====================================================================================
    logging.info(f"Flask app created for '{config_name}' environment.")
    return app
