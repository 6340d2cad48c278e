from quicktable.models.restaurant import Restaurant
from quicktable.models.reservation import Reservation

__all__ = [
    "Restaurant",
    "Reservation",
]
