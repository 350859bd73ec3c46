"""
Request predicates and response builders shared by controllers and errors.
"""

from flask import current_app, redirect, request as current_request


def is_ajax(request=None):
    """True when the request was sent by XMLHttpRequest"""
    request = request or current_request
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


def wants_json(request=None):
    """
    True when the client's preferred response type is JSON

    Only the best match of the Accept header is considered, so
    'text/html, application/json' is not a JSON client.
    """
    request = request or current_request
    best = request.accept_mimetypes.best
    return bool(best) and ('/json' in best or '+json' in best)


def _collapse(multi_dict):
    """Single values as scalars, repeated keys (tags=a&tags=b) as lists"""
    return {
        key: values if len(values) > 1 else values[0]
        for key, values in multi_dict.to_dict(flat=False).items()
    }


def request_input(request=None):
    """
    All input of the request as a dict

    Query args first, then form fields, then a JSON object body. Later
    sources win on key collisions. A JSON body that is not an object
    (a list, a string) has no field names and is not merged.
    """
    request = request or current_request
    data = _collapse(request.args)
    data.update(_collapse(request.form))

    body = request.get_json(silent=True)
    if isinstance(body, dict):
        data.update(body)

    return data


def json_response(payload, status=200):
    """Pretty-printed JSON response keeping the payload key order"""
    body = current_app.json.dumps(payload, indent=4, sort_keys=False)
    return current_app.response_class(
        f"{body}\n", status=status, mimetype=current_app.json.mimetype)


def back_url(request=None):
    request = request or current_request
    return request.referrer or '/'


def back(request=None):
    """Redirect to the page the request came from"""
    return redirect(back_url(request))
