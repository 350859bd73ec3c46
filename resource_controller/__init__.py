"""
Flask Resource Controller

A Python library for building CRUD resource controllers on Flask with
consistent route names, view locations, validation and JSON envelopes.

Key Features:
- Route names derived from alias + resource name + action
- Themed and vendor (module::) view resolution, with AJAX partials
- Form-request validation on top of marshmallow
- Standard 200/404/422/500 JSON envelopes
- Flash + redirect-back for browser clients
- Dependency container for repositories and form requests

Quick Start:
    from resource_controller import AbstractResourceController, create_app

    class UsersController(AbstractResourceController):
        resource_name = 'users'
        repository = 'myapp.repositories.UserRepository'

        def index(self, request):
            return self.valid_success_json_response(data=self.repository.all())
        ...

    app = create_app("admin")
    app.register_resource(UsersController)
    app.run()
"""

__version__ = "1.0.0"
__author__ = "Resource Controller Team"

from .core import ResourceControllerApp, create_app
from .container import Container
from .controller import AbstractResourceController, get_container
from .exceptions import ControllerError
from .validation import FormRequest, Validator, make_validator

__all__ = [
    'ResourceControllerApp',
    'create_app',
    'Container',
    'AbstractResourceController',
    'get_container',
    'ControllerError',
    'FormRequest',
    'Validator',
    'make_validator',
    '__version__'
]
