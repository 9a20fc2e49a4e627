class AssociationWarning(UserWarning):
    """Raised when a generated report cannot be linked to its source image.

    Callers log it and fall back to a report without an associated image.
    """
