#!/usr/bin/python3
"""SQLConnector, a small convenience layer over relational database drivers.

Opens a connection, builds SQL statements from key-value input, executes
prepared statements and shapes the fetched rows into dictionaries and lists.
All protocol work, parsing and transaction isolation is left to the driver
(PyMySQL for MySQL, sqlite3 for SQLite).

example usage:

  import sqlconnector
  connector = sqlconnector.Connect({'host': 'localhost', 'user': 'shop',
                                    'passwd': 'secret', 'schema': 'shop'})
  connector.QuickInsert('customer', {'name': 'Elmer', 'country': 'NL'})
  customer = connector.Prepare(
      'SELECT * FROM customer WHERE ID = %(id)s', {'id': 1}).Select()
"""
__version__ = '1.0.0'

# Application specific modules
from .connector import Connector
from .connector import Error
from .connector import NotPreparedError
from .connector import PrimaryKeyError
from .connector import TableNotFoundError
from .connector import TransactionError


def Connect(*args, **kwargs):
  """Factory function for connector.Connector."""
  return Connector(*args, **kwargs)


def ConnectFromConfig(*args, **kwargs):
  """Factory function for connector.Connector, reading an ini file."""
  return Connector.FromConfig(*args, **kwargs)
