"""
Signed-in identity for the web front end.

A placeholder sign-in: the login form stores a role and a user id in
the Django session. There is no password check and no OIDC flow; the
API trusts whatever identity header the front end sends.
"""

from functools import wraps

from django.shortcuts import redirect

from apps.core.identity import Role

from .client import MedicationApiClient

SESSION_ROLE_KEY = "web_role"
SESSION_USER_KEY = "web_user_id"


def sign_in(request, role: Role, user_id: str) -> None:
    request.session.cycle_key()
    request.session[SESSION_ROLE_KEY] = role.value
    request.session[SESSION_USER_KEY] = user_id


def sign_out(request) -> None:
    request.session.flush()


def current_identity(request):
    """(Role, user_id) for the signed-in user, or None."""
    role = request.session.get(SESSION_ROLE_KEY)
    user_id = request.session.get(SESSION_USER_KEY)
    if not role or not user_id:
        return None
    try:
        return Role(role), user_id
    except ValueError:
        return None


def role_required(role: Role):
    """
    Only let users signed in as ``role`` through.

    The view receives ``request.identity`` and ``request.api`` (a client
    bound to that identity).
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            identity = current_identity(request)
            if identity is None:
                return redirect("web:login")
            if identity[0] is not role:
                return redirect("web:index")

            request.identity = identity
            request.api = MedicationApiClient(*identity)
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
