"""
Controller errors

ControllerError covers configuration mistakes in concrete controllers and
missing views. It renders itself: JSON clients get a 500 envelope, browsers
are sent back with the message flashed under the error status key.
"""

from flask import flash, url_for

from .http import back, back_url, json_response, wants_json

ERROR_FLASH_MESSAGE_KEY = 'resource_controller.status.error'


class ControllerError(Exception):
    """
    Raised when a resource controller is misconfigured or a view is missing

    Args:
        message: Human readable message, already translated
        route_name: Named route the client should be pointed at (optional)
    """

    def __init__(self, message, route_name=None):
        super().__init__(message)
        self.message = message
        self.route_name = route_name

    def report(self):
        """Reporting is left to the host application"""

    def render(self, request):
        """
        Convert the error into an HTTP response for the given request

        Must be called inside a request context.
        """
        if wants_json(request):
            return self.valid_internal_server_error_json_response(request)

        flash(self.message, ERROR_FLASH_MESSAGE_KEY)
        return back(request)

    def valid_internal_server_error_json_response(self, request):
        if self.route_name:
            redirect_to = url_for(self.route_name)
        else:
            redirect_to = back_url(request)

        return json_response({
            'code': '500',
            'message': self.message,
            'errors': [],
            'redirect': redirect_to,
        }, 500)
