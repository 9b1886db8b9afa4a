from cocheras.models.user import User
from cocheras.models.district import District
from cocheras.models.space import Space
from cocheras.models.space_owner import SpaceOwner
from cocheras.models.reservation import Reservation
from cocheras.models.payment import Payment
from cocheras.models.review import Review
from cocheras.models.notification import Notification

# This makes the models directory a Python package and ensures all models are loaded
