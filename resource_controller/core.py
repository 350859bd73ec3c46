# Flask Resource Controller
# Application wiring: logging, tracing, container, translations and error rendering

from flask import Flask, jsonify, request
from flask_babel import Babel
import logging
import os

from .container import Container
from .exceptions import ControllerError

# Configure basic logging
logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


class ResourceControllerApp:
    """
    Flask application prepared for resource controllers

    Features:
    - Dependency container for repositories and form requests
    - Flask-Babel catalogs for controller messages
    - ControllerError rendered as 500 JSON or flash + redirect
    - Log level and OpenTelemetry export from env

    Usage:
        app = ResourceControllerApp(
            name="admin",
            translation_directories=["translations"],
            default_locale="es",
        )
        app.container.singleton(UserRepository, lambda: UserRepository(db))

        UsersController.register(app.flask_app)
        app.run()

    An existing Flask app can be passed as flask_app instead of having
    one created.
    """

    def __init__(self,
                 name,
                 flask_app=None,
                 translation_directories=None,
                 default_locale=None,
                 locale_selector=None,
                 view_extension=None,
                 secret_key=None,
                 container=None,
                 port=8000,
                 log_level=None,
                 otel_exporter_url=None):
        """
        Initialize the app with configuration

        Args:
            translation_directories: gettext catalog directories for Flask-Babel.
                Defaults to BABEL_TRANSLATION_DIRECTORIES config, then 'translations'.
            default_locale: locale used when locale_selector gives none
                (BABEL_DEFAULT_LOCALE, default 'en')
            locale_selector: callable returning the locale of the current request
            view_extension: template file extension. Defaults to
                RESOURCE_CONTROLLER_VIEW_EXTENSION env var, then '.html'.
            secret_key: session signing key, needed for flash messages.
                Defaults to SECRET_KEY env var.
            log_level: logging level (e.g. logging.INFO, "DEBUG"). Defaults to LOG_LEVEL env var.
            otel_exporter_url: OTLP exporter URL. Defaults to OTEL_EXPORTER_OTLP_ENDPOINT env var.
        """
        self.name = name
        self.port = port

        # Initialize Flask app
        self.flask_app = flask_app or Flask(name)

        # Setup logging first
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'INFO')
        self._setup_logging()

        # Setup OTEL
        self.otel_exporter_url = otel_exporter_url or os.getenv(
            'OTEL_EXPORTER_OTLP_ENDPOINT')
        self._setup_otel()

        # Flask configuration
        config = self.flask_app.config
        config['SECRET_KEY'] = secret_key or config.get('SECRET_KEY') or os.getenv('SECRET_KEY')
        if not config['SECRET_KEY']:
            config['SECRET_KEY'] = 'dev'
            self.logger.warning(
                "SECRET_KEY not set, using the insecure default 'dev'. "
                "Sessions and flash messages can be forged; set SECRET_KEY in production.")
        if translation_directories:
            if not isinstance(translation_directories, str):
                translation_directories = ';'.join(translation_directories)
            config['BABEL_TRANSLATION_DIRECTORIES'] = translation_directories
        if default_locale:
            config['BABEL_DEFAULT_LOCALE'] = default_locale
        config['RESOURCE_CONTROLLER_VIEW_EXTENSION'] = view_extension or os.getenv(
            'RESOURCE_CONTROLLER_VIEW_EXTENSION', '.html')

        self.container = container or Container(logger=self.logger)

        self._setup_babel(locale_selector)
        self.flask_app.extensions['resource_controller'] = self

        self._register_error_handlers()
        self._register_built_in_routes()

    def _setup_logging(self):
        """Configure logging level and format"""
        # Convert string log level to logging constant
        if isinstance(self.log_level, str):
            self.log_level = getattr(logging, self.log_level.upper(), logging.INFO)

        # Configure root logger
        logging.getLogger().setLevel(self.log_level)

        # Configure Flask app logger
        self.flask_app.logger.setLevel(self.log_level)
        self.logger = self.flask_app.logger

        self.logger.info(f"Logging initialized at level: {logging.getLevelName(self.log_level)}")

    def _setup_babel(self, locale_selector):
        """Install Flask-Babel unless the app already has it"""
        if 'babel' in self.flask_app.extensions:
            self.logger.debug("Flask-Babel already installed, keeping its configuration")
            return

        Babel(self.flask_app, locale_selector=locale_selector)
        self.logger.info(
            f"Translations: {self.flask_app.config['BABEL_TRANSLATION_DIRECTORIES']} "
            f"(default locale {self.flask_app.config['BABEL_DEFAULT_LOCALE']})")

    def _setup_otel(self):
        """Configure OpenTelemetry tracing"""
        if not self.otel_exporter_url:
            self.logger.info("OTEL_EXPORTER_OTLP_ENDPOINT not set, tracing disabled.")
            return

        try:
            from opentelemetry import trace
            from opentelemetry.sdk.trace import TracerProvider
            from opentelemetry.sdk.trace.export import BatchSpanProcessor
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
            from opentelemetry.instrumentation.flask import FlaskInstrumentor
            from opentelemetry.sdk.resources import SERVICE_NAME, Resource

            # Set up resource
            resource = Resource(attributes={
                SERVICE_NAME: self.name
            })

            # Set up tracer provider
            provider = TracerProvider(resource=resource)
            processor = BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otel_exporter_url))
            provider.add_span_processor(processor)
            trace.set_tracer_provider(provider)

            # Instrument Flask
            FlaskInstrumentor().instrument_app(self.flask_app)

            self.logger.info(f"OpenTelemetry tracing enabled. Sending to: {self.otel_exporter_url}")

        except ImportError:
            self.logger.warning(
                "OpenTelemetry libraries not found. Run 'pip install flask-resource-controller' "
                "with its opentelemetry dependencies to enable tracing.")
        except Exception as e:
            self.logger.error(f"Failed to initialize OpenTelemetry: {e}")

    def _register_error_handlers(self):
        """Render ControllerError raised anywhere in a request"""

        @self.flask_app.errorhandler(ControllerError)
        def handle_controller_error(error):
            error.report()
            return error.render(request)

    def _register_built_in_routes(self):
        """Register standard endpoints"""

        @self.flask_app.route('/health', methods=['GET'])
        def health():
            return jsonify({
                "status": "healthy",
                "service": self.name,
            })

    def route(self, rule, **options):
        """Standard Flask route"""
        return self.flask_app.route(rule, **options)

    def register_resource(self, controller_class, url_prefix=None):
        """
        Register the resource routes of a controller class

        Usage:
            app.register_resource(UsersController)
            app.register_resource(PostsController, url_prefix='/blog/posts')
        """
        controller_class.register(self.flask_app, url_prefix=url_prefix)

    def run(self, **kwargs):
        """Start the app"""
        self.logger.info("=" * 60)
        self.logger.info(f"Starting {self.name}")
        self.logger.info("=" * 60)
        self.logger.info(f"Port: {self.port}")
        self.logger.info(f"Bindings: {self.container.list_bindings()}")
        self.logger.info("=" * 60)

        kwargs.setdefault('host', '0.0.0.0')
        kwargs.setdefault('port', self.port)
        self.flask_app.run(debug=False, **kwargs)


# Convenience function for quick setup
def create_app(name, **config):
    """
    Quick setup for a resource controller app

    Usage:
        app = create_app("admin")
        app.register_resource(UsersController)
        app.run()
    """
    return ResourceControllerApp(name, **config)
