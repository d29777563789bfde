"""Wedding invite microsite and RSVP API"""

__version__ = "0.1.0"
