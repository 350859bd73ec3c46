"""
Translation lookup for controller messages

Messages are translated with Flask-Babel from the app's gettext catalogs
(BABEL_TRANSLATION_DIRECTORIES, domain 'messages'). Message ids are the
dotted keys below; placeholders use the gettext %(name)s form:

    msgid "resource_controller.viewnotfound"
    msgstr "Vista no encontrada: %(view)s"

Without an app context, or on an app where Flask-Babel is not set up,
nothing is translated.
"""

from flask import current_app, has_app_context
from flask_babel import gettext


def _enabled():
    return has_app_context() and 'babel' in current_app.extensions


def has(key):
    """Check whether the active catalog translates key"""
    return _enabled() and gettext(key) != key


def trans(key, **replace):
    """Translate key, filling placeholders from replace. Unknown keys are returned as-is."""
    if not _enabled():
        return key
    return gettext(key, **replace)
