"""
Route decorators.

    class Users(PinupController):
        @pins.get(':name')
        def show(self, rec, options):
            ...

The decorator only records (method, paths) on the function; the controller
collects these records when it is instantiated.
"""

from pinup.utils.paths import as_list

ROUTES_ATTR = '__pinup_routes__'
DATA_ATTR = '__pinup_data__'

PINS_METHODS = ('get', 'post', 'delete', 'patch', 'put', 'option')


def route(method: str, *paths: str):
    """
    Declare a handler method as a route for one HTTP method.

    Args:
        method: One of PINS_METHODS
        *paths: Paths relative to the controller ('' when none given)

    Returns:
        Decorator that returns the function unchanged apart from the
        route record
    """
    if method not in PINS_METHODS:
        raise ValueError(f"Unsupported request method: {method}")

    def decorator(f):
        routes = list(getattr(f, ROUTES_ATTR, []))
        routes.append((method, as_list(list(paths), default='')))
        setattr(f, ROUTES_ATTR, routes)
        return f

    return decorator


class _Pins:
    """pins.get(...), pins.post(...) and friends."""

    def get(self, *paths: str):
        return route('get', *paths)

    def post(self, *paths: str):
        return route('post', *paths)

    def delete(self, *paths: str):
        return route('delete', *paths)

    def patch(self, *paths: str):
        return route('patch', *paths)

    def put(self, *paths: str):
        return route('put', *paths)

    def option(self, *paths: str):
        return route('option', *paths)


pins = _Pins()
