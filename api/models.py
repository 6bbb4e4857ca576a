# Models live in per-domain subpackages; importing them here registers them
# with the ``api`` app.
from api.client.models import Role, User  # noqa: F401
from api.garage.models import Brand, Car, CarModel, CarStatus  # noqa: F401
from api.rental.models import Rental, RentalStatus  # noqa: F401
