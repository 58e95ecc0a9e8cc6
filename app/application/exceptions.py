class CatalogError(ValueError):
    """Base class for expected, user-facing catalog failures."""


class InvalidInputError(CatalogError):
    pass


class NotFoundError(CatalogError):
    pass


class ConflictError(CatalogError):
    pass
