"""
Domain exceptions raised by the services.

Routes and exception handlers translate these into HTTP responses; services
never raise HTTPException themselves.
"""
from typing import Any, Dict


class StorefrontError(Exception):
    """Base class for domain errors"""


class NotFoundError(StorefrontError):
    """A store, plan, subscription or zone required by the operation does not exist"""

    def __init__(self, resource: str, identifier: str = None):
        self.resource = resource
        self.identifier = identifier
        message = f"{resource} not found"
        if identifier:
            message = f"{message}: {identifier}"
        super().__init__(message)


class PaymentRequiredError(StorefrontError):
    """The requested plan must go through the hosted payment flow"""


class LimitExceededError(StorefrontError):
    """
    A plan ceiling has been reached.

    Carries the denial payload verbatim so the request layer can render an
    upgrade call-to-action instead of a bare failure.
    """

    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload
        super().__init__(payload.get("message", "Plan limit reached"))
