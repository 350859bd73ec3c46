"""
Resource Controllers for Flask

Provides an abstract base for CRUD controllers. Subclasses declare their
configuration as class attributes and implement the seven resource actions;
route names, view locations, validation and JSON envelopes come for free.

Usage:
    # controllers/users.py
    from resource_controller import AbstractResourceController

    class UsersController(AbstractResourceController):
        alias = 'admin'
        theme = 'default'
        resource_name = 'users'
        repository = 'myapp.repositories.UserRepository'
        form_request = 'myapp.requests.UserRequest'

        def index(self, request):
            return self.render_view('index', items=self.repository.all())

        def store(self, request):
            validator = self.validate_rules()
            if validator.fails():
                return self.redirect_back_with_errors(validator)
            self.repository.create(validator.validated())
            return self.redirect_with_flash(self.success_flash_message_key, 'Created')
        ...

    UsersController.register(app)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import logging

from flask import (Blueprint, current_app, flash, has_app_context, redirect, render_template,
                   request, url_for)
from jinja2 import TemplateNotFound
from opentelemetry import trace

from . import lang
from .container import Container
from .exceptions import ControllerError
from .http import back, is_ajax, json_response, request_input, wants_json
from .validation import FormRequest, Validator, make_validator

tracer = trace.get_tracer(__name__)

PROPERTY_NOT_SET_KEY = 'resource_controller.propertynotset'
VIEW_NOT_FOUND_KEY = 'resource_controller.viewnotfound'
VIEW_EXTENSION_CONFIG_KEY = 'RESOURCE_CONTROLLER_VIEW_EXTENSION'

# (action, url suffix, methods) in Laravel resource-route layout
RESOURCE_ACTIONS = [
    ('index', '', ['GET']),
    ('create', '/create', ['GET']),
    ('store', '', ['POST']),
    ('show', '/<key>', ['GET']),
    ('edit', '/<key>/edit', ['GET']),
    ('update', '/<key>', ['PUT', 'PATCH']),
    ('destroy', '/<key>', ['DELETE']),
]


def str_finish(value: Optional[str], cap: str) -> str:
    """Append cap to value unless it already ends with it. Empty values stay empty."""
    if not value:
        return ''
    if value.endswith(cap):
        return value
    return value + cap


def view_template_name(view: str, extension: Optional[str] = None) -> str:
    """
    Map a dotted view name to a Jinja template path

    'admin::default.users.ajax.index' -> 'admin/default/users/ajax/index.html'
    """
    if extension is None:
        extension = '.html'
        if has_app_context():
            extension = current_app.config.get(VIEW_EXTENSION_CONFIG_KEY, extension)

    namespace, sep, name = view.rpartition('::')
    path = name.replace('.', '/')
    if sep:
        path = f"{namespace}/{path}"
    return path + extension


# Fallback container when no ResourceControllerApp is installed
_container = Container()


def get_container() -> Container:
    """Container of the current app, or the global one outside an app"""
    if has_app_context():
        extension = current_app.extensions.get('resource_controller')
        if extension is not None:
            return extension.container
    return _container


class AbstractResourceController(ABC):
    """
    Base class for resource (CRUD) controllers

    One instance handles one request. Configuration lives in class
    attributes and is normalized onto the instance at construction:
    alias, theme, prefix and resource_name end with '.', module ends
    with '::'.
    """

    # The alias for named routes.
    alias: Optional[str] = None
    # The location for themed views.
    theme: Optional[str] = None
    # The vendor views prefix.
    module: Optional[str] = None
    # The prefix for named routes.
    prefix: Optional[str] = None
    # The repository class (or dotted path) to instantiate.
    repository: Any = None
    # The FormRequest class (or dotted path) to instantiate.
    form_request: Any = None
    # The name of the resource.
    resource_name: Optional[str] = None
    # Whether the model uses soft deletes.
    use_soft_deletes: bool = False

    info_flash_message_key = 'resource_controller.status.info'
    error_flash_message_key = 'resource_controller.status.error'
    success_flash_message_key = 'resource_controller.status.success'
    warning_flash_message_key = 'resource_controller.status.warning'

    def __init__(self, container: Optional[Container] = None, logger=None):
        """
        Check configuration and resolve the repository

        Args:
            container: Container used to build collaborators. Defaults to
                the current app's container.
            logger: Logger to use (default: module logger)

        Raises:
            ControllerError: if repository or resource_name is not set
        """
        self.logger = logger or logging.getLogger(__name__)
        self.container = container or get_container()

        self._check_property('repository')
        self._check_property('resource_name')
        self._format_route_name_and_view_path_modifiers()

        self.repository = self.container.make(self.repository)
        self.logger.debug(
            f"{self.__class__.__name__} ready for resource '{self.resource_name}'")

    # ============================================
    # RESOURCE ACTIONS - Implement in subclass
    # ============================================

    @abstractmethod
    def index(self, request):
        """Display a listing of the resource."""

    @abstractmethod
    def create(self, request):
        """Show the form for creating a new resource."""

    @abstractmethod
    def store(self, request):
        """Store a newly created resource in storage."""

    @abstractmethod
    def show(self, request, key):
        """Display the specified resource."""

    @abstractmethod
    def edit(self, request, key):
        """Show the form for editing the specified resource."""

    @abstractmethod
    def update(self, request, key):
        """Update the specified resource in storage."""

    @abstractmethod
    def destroy(self, request, key):
        """Remove the specified resource from storage."""

    # ============================================
    # ROUTES AND VIEWS
    # ============================================

    def get_route_name(self, action: str) -> str:
        """Named route for action, e.g. 'admin.users.index'"""
        return self.alias + self.resource_name + action

    def get_redirection_route(self) -> str:
        """Default route to send clients to after an action"""
        return self.get_route_name('index')

    def get_view_location(self, action: str) -> str:
        """
        View name for action

        AJAX requests get the 'ajax.' variant so partials can be served
        from the same controller.
        """
        location = self.module + self.theme + self.resource_name
        if is_ajax():
            return location + 'ajax.' + action
        return location + action

    def check_view_exists(self, view: str):
        """
        Raises:
            ControllerError: if no template exists for view
        """
        try:
            current_app.jinja_env.get_template(view_template_name(view))
        except TemplateNotFound:
            if lang.has(VIEW_NOT_FOUND_KEY):
                message = lang.trans(VIEW_NOT_FOUND_KEY, view=view)
            else:
                message = f"Requested page couldn't be loaded because the view file is missing: {view}"

            self.logger.warning(message)
            raise ControllerError(message, route_name=self.get_redirection_route())

    def render_view(self, action: str, **context):
        """Render the view of action after checking it exists"""
        view = self.get_view_location(action)
        self.check_view_exists(view)
        return render_template(view_template_name(view), **context)

    # ============================================
    # VALIDATION
    # ============================================

    def get_form_request_instance(self) -> FormRequest:
        """The configured form request, or an empty one"""
        if not self.form_request:
            return FormRequest()

        return self.container.make(self.form_request)

    def validate_rules(self) -> Validator:
        """
        Validate the current request input against the form request rules

        Without a configured form request there are no rules, so the
        validator always passes.
        """
        data = request_input()
        rules = {}
        messages = {}

        if self.form_request:
            form_request = self.container.make(self.form_request)
            rules = form_request.rules()
            messages = form_request.messages()

        with tracer.start_as_current_span('resource_controller.validate') as span:
            span.set_attribute('resource.name', self.resource_name)
            span.set_attribute('validation.rule_count', len(rules))

            validator = make_validator(data, rules, messages)
            if validator.fails():
                span.set_attribute('validation.failed', True)
                self.logger.info(
                    f"Validation failed for {self.resource_name}: {list(validator.errors())}")

        return validator

    def redirect_back_with_errors(self, validator: Validator):
        """
        422 JSON for JSON clients, otherwise back to the form

        The redirect flashes the errors under 'errors' and the submitted
        input under 'old_input'.
        """
        if wants_json():
            return self.valid_unprocessable_entity_json_response(validator.errors())

        flash(validator.errors(), 'errors')
        flash(request_input(), 'old_input')
        return back()

    def redirect_with_flash(self, key: str, message: str, route: Optional[str] = None):
        """Flash message under key and redirect to route (default: index)"""
        flash(message, key)
        return redirect(url_for(route or self.get_redirection_route()))

    # ============================================
    # JSON RESPONSES
    # ============================================

    def valid_success_json_response(self, message: str = 'Success', data: Any = None):
        """200 Success envelope"""
        return json_response({
            'code': '200',
            'message': message,
            'data': [] if data is None else data,
            'errors': [],
            'redirect': url_for(self.get_redirection_route()),
        }, 200)

    def valid_not_found_json_response(self, message: str = 'Not found'):
        """404 Not found envelope"""
        return json_response({
            'code': '404',
            'message': message,
            'errors': [],
            'redirect': url_for(self.get_redirection_route()),
        }, 404)

    def valid_unprocessable_entity_json_response(self, errors: Dict[str, Any],
                                                 message: str = 'Unprocessable Entity'):
        """422 Unprocessable entity envelope"""
        return json_response({
            'code': '422',
            'message': message,
            'errors': errors,
            'redirect': url_for(self.get_redirection_route()),
        }, 422)

    # ============================================
    # REGISTRATION
    # ============================================

    @classmethod
    def register(cls, app, url_prefix: Optional[str] = None):
        """
        Register the seven resource routes on a Flask app or blueprint

        Endpoint names are the controller's route names, so
        url_for(controller.get_route_name('index')) works. A new controller
        is built for every request.

        On a blueprint the routes go into a child blueprint named after
        resource_name, nested in the given one. Flask prefixes endpoints
        with blueprint names, so the blueprint's name has to be the alias:

            admin = Blueprint('admin', __name__, url_prefix='/admin')
            UsersController.register(admin)   # alias = 'admin'
            app.register_blueprint(admin)
            url_for('admin.users.index')      # -> /admin/users

        The blueprint must not be registered on the app yet.

        Args:
            app: Flask application or Blueprint
            url_prefix: URL prefix (default: '/<resource_name>')

        Raises:
            ControllerError: if resource_name is not set, or the
                blueprint name does not match the alias
        """
        cls._check_property('resource_name')
        alias = str_finish(cls.alias, '.')
        resource_name = str_finish(cls.resource_name, '.')
        if url_prefix is None:
            url_prefix = '/' + resource_name.strip('.').replace('.', '/')
        url_prefix = url_prefix.rstrip('/')

        def make_handler(action):
            def handler(**kwargs):
                controller = cls()
                return getattr(controller, action)(request, **kwargs)
            handler.__name__ = f"{cls.__name__}_{action}"
            return handler

        if isinstance(app, Blueprint):
            cls._register_on_blueprint(app, alias, resource_name, url_prefix, make_handler)
        else:
            for action, suffix, methods in RESOURCE_ACTIONS:
                app.add_url_rule(
                    (url_prefix + suffix) or '/',
                    endpoint=alias + resource_name + action,
                    view_func=make_handler(action),
                    methods=methods,
                )

        logging.getLogger(__name__).info(
            f"Registered resource routes: {alias}{resource_name}* at {url_prefix or '/'}")

    @classmethod
    def _register_on_blueprint(cls, blueprint, alias, resource_name, url_prefix, make_handler):
        if alias != blueprint.name + '.':
            raise ControllerError(
                f"Blueprint '{blueprint.name}' cannot hold routes named '{alias}{resource_name}*': "
                f"set alias = '{blueprint.name}'.")

        child_name = resource_name.rstrip('.')
        if '.' in child_name:
            raise ControllerError(
                f"resource_name '{child_name}' cannot contain dots when registered on a blueprint.")

        child = Blueprint(child_name, cls.__module__, url_prefix=url_prefix or None)
        for action, suffix, methods in RESOURCE_ACTIONS:
            child.add_url_rule(
                suffix or ('' if url_prefix else '/'),
                endpoint=action,
                view_func=make_handler(action),
                methods=methods,
            )
        blueprint.register_blueprint(child)

    # ============================================
    # CONFIGURATION CHECKS
    # ============================================

    def _format_route_name_and_view_path_modifiers(self):
        self.alias = str_finish(self.alias, '.')
        self.theme = str_finish(self.theme, '.')
        self.module = str_finish(self.module, '::')
        self.prefix = str_finish(self.prefix, '.')
        self.resource_name = str_finish(self.resource_name, '.')

    @classmethod
    def _check_property(cls, name: str):
        """
        Raises:
            ControllerError: if the configuration attribute name is empty
        """
        if getattr(cls, name, None):
            return

        if lang.has(PROPERTY_NOT_SET_KEY):
            message = lang.trans(PROPERTY_NOT_SET_KEY, property=name)
        else:
            message = f"{name} property must be set."

        raise ControllerError(message)


__all__ = [
    'AbstractResourceController',
    'RESOURCE_ACTIONS',
    'get_container',
    'str_finish',
    'view_template_name',
]
