"""
Domain errors raised by the service layer.

Handlers registered in main.py turn these into HTTP responses:
ValidationFailed (and subclasses) -> 422 with a field-keyed error map,
RecordNotFound -> 404.
"""


class ValidationFailed(Exception):
    message = "Validation failed"

    def __init__(self, errors, message=None):
        # errors: {"field": ["msg", ...]}
        self.errors = errors
        if message:
            self.message = message
        super().__init__(self.message)

    @classmethod
    def single(cls, field, msg, message=None):
        return cls({field: [msg]}, message=message)


class BillingError(ValidationFailed):
    message = "Billing rule violated"


class PaymentError(ValidationFailed):
    message = "Payment rejected"


class ImportRejected(ValidationFailed):
    message = "Import failed"


class RecordNotFound(Exception):
    def __init__(self, message):
        self.message = message
        super().__init__(message)
