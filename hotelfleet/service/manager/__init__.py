"""
Managers own the multi-step operations of the system, where several rows
have to change together.
"""

from .rental_manager import RentalManager, RentalOutcome
