"""
barberslots - appointment slot generation and booking for a barbershop.
"""

__version__ = "0.1.0"
