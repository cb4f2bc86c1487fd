"""Student parking registration portal.

Students pick a spot, register and get a confirmation; an administrator
manages the registrations from a password protected console. The Flask
application lives in ``parking_portal.app``.
"""

__version__ = "1.0.0"
