"""Error kinds raised by the catalog, order and identity stores.

The stores only say *what* went wrong; `main` decides the HTTP status.
"""


class StorefrontError(Exception):
    pass


class ValidationFailed(StorefrontError, ValueError):
    """Malformed or missing input."""


class InvalidProductReference(ValidationFailed):
    def __init__(self, product_id: int):
        super().__init__(f"product {product_id} does not exist")
        self.product_id = product_id


class NotFound(StorefrontError):
    pass


class Unauthorized(StorefrontError):
    pass


class Forbidden(StorefrontError):
    pass


class Conflict(StorefrontError):
    pass
