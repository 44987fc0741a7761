"""
Caller identity for API requests.

Callers identify themselves with a role header (``X-Patient-Id``,
``X-Prescriber-Id`` or ``X-Pharmacist-Id``) set by the authenticating
gateway. Views resolve the id once with ``require_identity`` and pass
it to the service layer as a plain argument. There is no fallback
identity: a missing header is a 401.
"""

import enum

from .exceptions import IdentityRequired


class Role(str, enum.Enum):
    PATIENT = "PATIENT"
    PRESCRIBER = "PRESCRIBER"
    PHARMACIST = "PHARMACIST"

    @property
    def header(self) -> str:
        return ROLE_HEADERS[self]


ROLE_HEADERS = {
    Role.PATIENT: "X-Patient-Id",
    Role.PRESCRIBER: "X-Prescriber-Id",
    Role.PHARMACIST: "X-Pharmacist-Id",
}


def require_identity(request, role: Role) -> str:
    """Return the caller id for ``role`` or raise IdentityRequired."""
    value = (request.headers.get(role.header) or "").strip()
    if not value:
        raise IdentityRequired(
            message=f"{role.header} header is required",
            code=f"{role.value}_IDENTITY_REQUIRED",
        )
    return value
