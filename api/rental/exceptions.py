class RentalError(Exception):
    """Base class for rental lifecycle failures."""


class NotFoundError(RentalError):
    """A referenced account, car or rental does not exist."""


class InvalidStateError(RentalError):
    """The rental or car is not in a state that allows the transition."""
