"""
Backend operations (Create, Read, Update, Delete) grouped by resource.

This layer keeps page handlers free of URL building and JSON decoding,
following the Repository pattern over the REST backend.
"""

from hvac_console.crud import customer, job, technician, user

__all__ = ["customer", "job", "technician", "user"]
