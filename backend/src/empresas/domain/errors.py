"""
Error taxonomy for the registry.

Services raise these; the API layer maps them to HTTP responses using
the `status_code` hint on each class. Nothing here is retried.
"""


class RegistryError(Exception):
    """Base class for all registry errors."""

    code = "registry_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateKeyError(RegistryError):
    """A company with this tax id already exists."""

    code = "duplicate_key"
    status_code = 409

    def __init__(self, tax_id: str) -> None:
        super().__init__("A company with this tax id already exists")
        self.tax_id = tax_id


class ReferenceNotFoundError(RegistryError):
    """A transfer references a company that does not exist."""

    code = "reference_not_found"
    status_code = 400

    def __init__(self, tax_id: str) -> None:
        super().__init__("No company exists with this tax id")
        self.tax_id = tax_id


class NotFoundError(RegistryError):
    """The targeted company does not exist."""

    code = "not_found"
    status_code = 404

    def __init__(self, tax_id: str) -> None:
        super().__init__("No company was found with this tax id")
        self.tax_id = tax_id


class StoreFailureError(RegistryError):
    """Underlying persistence failure (connectivity, unclassified constraint)."""

    code = "store_failure"
    status_code = 500
