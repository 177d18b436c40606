#!/usr/bin/python3
"""This module implements the Connection class, which sets up a connection to
a MySQL database through PyMySQL. Rows are fetched as dictionaries, driver
errors are raised as exceptions, and autocommit is on outside of explicitly
started transactions.
"""

# Standard modules
import pymysql

# Application specific modules
from .. import base_connection

TABLE_LIKE = 'SHOW TABLES LIKE %s'
PRIMARY_KEYS = "SHOW KEYS FROM %s WHERE Key_name = 'PRIMARY'"


class Connection(pymysql.connections.Connection,
                 base_connection.BaseConnection):
  """MySQL Database Connection Object"""
  BACKEND = 'mysql'
  LAST_INSERT_ID_QUERY = 'SELECT LAST_INSERT_ID()'

  def __init__(self, host='localhost', user=None, passwd='', schema=None,
               port=3306, charset='utf8mb4', debug=False, **kwds):
    """Create a connection to the database.

    Arguments:
      host:     string, host to connect to. Default 'localhost'.
      user:     string, user to connect as.
      passwd:   string, password to use.
      schema:   string, database to use. Default same as user.
      port:     integer, TCP/IP port to connect to. Default 3306.
      charset:  string, the connection character set. Default 'utf8mb4'.
      debug:    bool, logs every statement at DEBUG level when True.

    Any other keyword arguments are handed to PyMySQL unchanged, for instance
    `ssl`, `connect_timeout` or `unix_socket`.
    """
    schema = schema or user
    self._SetupLogger(schema, debug=debug)
    kwds.setdefault('cursorclass', pymysql.cursors.DictCursor)
    kwds.setdefault('autocommit', True)
    super().__init__(host=host, user=user, password=passwd or '',
                     database=schema, port=int(port), charset=charset, **kwds)

  def begin(self):
    """Starts a transaction on the server."""
    self.StartQueryLog()
    super().begin()

  @staticmethod
  def Placeholder(name):
    """Returns the pyformat parameter marker PyMySQL expects."""
    return '%%(%s)s' % name

  def TableExists(self, table):
    """Returns whether `table` exists in the current database.

    LIKE wildcards in the table name are escaped, so `order_line` does not
    match a table named `orderXline`.
    """
    pattern = (table.replace('\\', '\\\\')
               .replace('%', '\\%')
               .replace('_', '\\_'))
    self.LogQuery(TABLE_LIKE, (pattern,))
    with self.cursor() as cursor:
      cursor.execute(TABLE_LIKE, (pattern,))
      return cursor.fetchone() is not None

  def PrimaryKey(self, table):
    """Returns the first column of the PRIMARY index on `table`, or None."""
    query = PRIMARY_KEYS % self.EscapeField(table)
    self.LogQuery(query)
    with self.cursor() as cursor:
      cursor.execute(query)
      row = cursor.fetchone()
    if row is None:
      return None
    return row['Column_name']

  # Error classes taken from PyMySQL
  Error = pymysql.Error
  InterfaceError = pymysql.InterfaceError
  DatabaseError = pymysql.DatabaseError
  DataError = pymysql.DataError
  OperationalError = pymysql.OperationalError
  IntegrityError = pymysql.err.IntegrityError
  InternalError = pymysql.InternalError
  ProgrammingError = pymysql.ProgrammingError
  NotSupportedError = pymysql.NotSupportedError
  Warning = pymysql.Warning
