#!/usr/bin/python3
"""SQLConnector MySQL interface package.

Functions:
  Connect: Connects to a MySQL server and returns a connection object.
           Refer to the documentation enclosed in the connection module for
           argument information.
"""

# Application specific modules
from . import connection


def Connect(*args, **kwargs):
  """Factory function for connection.Connection."""
  return connection.Connection(*args, **kwargs)
