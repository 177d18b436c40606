#!/usr/bin/python3
"""This module implements the Connection class, which sets up a connection to
an SQLite database. Rows are fetched as dictionaries, and the connection runs
in autocommit mode until a transaction is explicitly started.
"""

# Standard modules
import os
import sqlite3

# Application specific modules
from . import converters  # registers the date and time adapters
from .. import base_connection

MEMORY = ':memory:'
TABLE_EXISTS = ('SELECT `name` FROM `sqlite_master` '
                'WHERE `type`=:type AND `name`=:name')
TABLE_INFO = 'PRAGMA table_info(%s)'


def DictFactory(cursor, row):
  """Row factory that returns every row as a dictionary in field order."""
  return {column[0]: value for column, value in zip(cursor.description, row)}


class Connection(sqlite3.Connection, base_connection.BaseConnection):
  """SQLite Database Connection Object"""
  BACKEND = 'sqlite'
  LAST_INSERT_ID_QUERY = 'SELECT last_insert_rowid()'

  def __init__(self, host=None, user=None, passwd=None, schema=MEMORY,
               debug=False, **kwds):
    """Opens the database file named by `schema`.

    The `host`, `user` and `passwd` arguments are accepted for parity with the
    MySQL connection and ignored. Remaining keyword arguments are handed to
    sqlite3, except `port` and `charset` which have no meaning here.
    """
    kwds.pop('port', None)
    kwds.pop('charset', None)
    kwds['isolation_level'] = None
    self._SetupLogger(os.path.splitext(os.path.basename(schema))[0] or schema,
                      debug=debug)
    sqlite3.Connection.__init__(self, schema, **kwds)
    self.row_factory = DictFactory

  def begin(self):
    """Starts a transaction."""
    self.StartQueryLog()
    self.execute('BEGIN')

  @staticmethod
  def Placeholder(name):
    """Returns the named parameter marker sqlite3 expects."""
    return ':%s' % name

  def TableExists(self, table):
    """Returns whether `table` exists in the database."""
    params = {'type': 'table', 'name': table}
    self.LogQuery(TABLE_EXISTS, params)
    return self.execute(TABLE_EXISTS, params).fetchone() is not None

  def PrimaryKey(self, table):
    """Returns the first column of the primary key of `table`, or None."""
    query = TABLE_INFO % self.EscapeField(table)
    self.LogQuery(query)
    keys = [row for row in self.execute(query).fetchall() if row['pk']]
    if not keys:
      return None
    return min(keys, key=lambda row: row['pk'])['name']
