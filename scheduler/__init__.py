from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import logging
from logging.handlers import SMTPHandler, RotatingFileHandler
import os

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"]
)


def create_app(config_name='development'):
    """Application factory function"""
    app = Flask(__name__)

    # Load configuration
    from config import config
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login.init_app(app)
    limiter.init_app(app)

    # Configure logging
    configure_logging(app)

    # Build the stores handed to request handlers
    register_stores(app)

    # Register middleware
    register_middleware(app)

    # Register blueprints/routes
    register_routes(app)

    return app


def configure_logging(app):
    """Configure logging for the application"""
    # Ensure instance/logs directory exists
    logs_dir = os.path.join(app.instance_path, 'logs')
    if not os.path.exists(logs_dir):
        os.makedirs(logs_dir)

    # Always log to file (even in debug mode)
    app_log_path = os.path.join(logs_dir, 'app.log')
    file_handler = RotatingFileHandler(app_log_path, maxBytes=10240, backupCount=10)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
    file_handler.setLevel(logging.INFO)
    app.logger.addHandler(file_handler)

    # Set appropriate log level
    if app.debug:
        app.logger.setLevel(logging.DEBUG)
    else:
        app.logger.setLevel(logging.INFO)

    # Email notifications for production errors only
    if not app.debug and not app.testing and app.config.get('MAIL_SERVER'):
        auth = None
        if app.config['MAIL_USERNAME'] or app.config['MAIL_PASSWORD']:
            auth = (app.config['MAIL_USERNAME'], app.config['MAIL_PASSWORD'])
        secure = None
        if app.config['MAIL_USE_TLS']:
            secure = ()
        mail_handler = SMTPHandler(
            mailhost=(app.config['MAIL_SERVER'], app.config['MAIL_PORT']),
            fromaddr='no-reply@' + app.config['MAIL_SERVER'],
            toaddrs=app.config['ADMINS'], subject='Event Scheduler Failure',
            credentials=auth, secure=secure)
        mail_handler.setLevel(logging.ERROR)
        app.logger.addHandler(mail_handler)

    app.logger.info('Event Scheduler application startup')


def register_stores(app):
    """Create the account and event stores for this application instance"""
    from scheduler.accounts.store import AccountStore
    from scheduler.events.store import EventStore

    app.extensions['account_store'] = AccountStore(db.session)
    app.extensions['event_store'] = EventStore(db.session)


def register_middleware(app):
    """Register middleware functions"""

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        # The API only serves JSON
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"

        # HTTP Strict Transport Security
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        # X-Content-Type-Options
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # X-Frame-Options
        response.headers['X-Frame-Options'] = 'DENY'

        # Referrer Policy
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        return response


def register_routes(app):
    """Register application routes via blueprints"""
    from scheduler.accounts import bp as accounts_bp
    from scheduler.events import bp as events_bp

    app.register_blueprint(accounts_bp, url_prefix='/api')
    app.register_blueprint(events_bp, url_prefix='/api/events')

    # Register error handlers
    from scheduler.errors import register_error_handlers
    register_error_handlers(app)

    # Import models to ensure they're loaded
    from scheduler import models
