#!/usr/bin/python3
"""Shared behaviour for the backend connection classes.

The backend connections subclass their driver's connection class and mix this
in. It provides query logging, identifier quoting and the dialect hooks the
Connector depends on.
"""

# Standard modules
import logging


class BaseConnection:
  """Mixin for driver connections used by the Connector."""
  BACKEND = None
  LAST_INSERT_ID_QUERY = None

  def _SetupLogger(self, schema, debug=False):
    """Creates the `<backend>_<schema>` logger and the statement log."""
    self.debug = debug
    self.queries = []
    self.logger = logging.getLogger('%s_%s' % (self.BACKEND, schema))
    self.logger.setLevel(logging.DEBUG if debug else logging.WARNING)

  def StartQueryLog(self):
    """Clears the statement log at the start of a transaction."""
    del self.queries[:]
    self.logger.debug('Beginning new transaction.')

  def LogQuery(self, query, params=None):
    """Logs an executed statement, and keeps it when in debug mode."""
    if params is None:
      self.logger.debug(query)
    else:
      self.logger.debug('%s\nParameters: %r', query, params)
    if self.debug:
      self.queries.append(query)

  def LogRollback(self):
    """Writes the statements of a rolled back transaction to the log."""
    if self.queries:
      self.logger.warning(
          'Transaction was rolled back.\n'
          'Queries in transaction (last one triggered):\n\n%s',
          '\n\n'.join(self.queries))
    else:
      self.logger.warning('Transaction was rolled back.')

  @staticmethod
  def EscapeField(field):
    """Returns a SQL escaped field or table name.

    Dotted names are escaped per part, so `db.table` becomes `db`.`table`.
    """
    if not field:
      return ''
    fields = '.'.join('`%s`' % f.replace('`', '``') for f in field.split('.'))
    return fields.replace('`*`', '*')

  @staticmethod
  def Placeholder(name):
    """Returns the driver's named parameter marker for `name`."""
    raise NotImplementedError

  def TableExists(self, table):
    """Returns whether `table` exists in the current database."""
    raise NotImplementedError

  def PrimaryKey(self, table):
    """Returns the first primary key column of `table`, or None."""
    raise NotImplementedError
