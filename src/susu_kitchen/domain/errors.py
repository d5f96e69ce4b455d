"""Error taxonomy shared by services and the API layer."""


class KitchenError(Exception):
    """Base class for recoverable application errors."""


class GenerationError(KitchenError):
    """The generation gateway failed or returned unusable data."""


class CapturePermissionError(KitchenError, PermissionError):
    """Camera or microphone access was denied, so nothing was captured."""


class ValidationError(KitchenError):
    """A request was rejected before any state was touched."""


class NotFoundError(KitchenError):
    """A referenced profile, recipe or shopping item does not exist."""


class StaleStateError(KitchenError):
    """An async result arrived after its owning draft or view went away."""


class MediaStorageError(KitchenError):
    """Captured or generated media could not be saved."""
