#!/usr/bin/python3
"""This module implements the Connector, a statement-execution helper.

A Connector opens a database connection through one of the backend packages,
holds the statement that was last prepared on it together with its
parameters, and offers shortcut operations that build INSERT, UPDATE and
DELETE statements from plain dictionaries.

Operations that hand back their result (Modify, Query, Select, MultiModify)
close the connection when done. The next Prepare opens a new one. Inside a
transaction the connection stays open until it is committed or rolled back.

Prepared statements use the driver's own named parameter style: `%(name)s`
for MySQL and `:name` for SQLite.
"""

# Standard modules
import contextlib

# Application specific modules
from . import builder
from . import config
from . import mysql
from . import sqlite
from . import sqlresult

BACKENDS = {'mysql': mysql, 'sqlite': sqlite}
TABLE_NOT_FOUND = (
    "Connector Fatal Error: Table '%s' does not exist in this database.")


class Error(Exception):
  """Superclass used for inheritance and external exception handling."""


class NotPreparedError(Error):
  """A statement was executed before one was prepared."""


class PrimaryKeyError(Error, LookupError):
  """The table has no primary key to address a record by."""


class TableNotFoundError(Error, LookupError):
  """The table does not exist in the connected database."""


class TransactionError(Error):
  """A transaction was started twice, or ended while none was open."""


class Connector:
  """Opens a database connection and executes prepared statements on it."""

  def __init__(self, connection_params):
    """Opens a new database connection.

    Arguments:
      @ connection_params: dict
        Keys `host`, `user`, `passwd` and `schema` select the database. The
        optional `backend` is either 'mysql' (default) or 'sqlite', for which
        `schema` names the database file. Other keys, such as `port`,
        `charset` and `debug`, are handed to the backend connection.

    Raises:
      ValueError: the backend is not known.
    """
    self.connection_params = dict(connection_params)
    self.connection = None
    self.sql = None
    self.params = None
    self.insertid = None
    self.in_transaction = False
    self._destroy_pending = False
    self._InitConnection()

  @classmethod
  def FromConfig(cls, filename, section='database', path=None):
    """Returns a Connector for the settings in an ini file section."""
    settings = config.SettingsManager(filename, path=path)
    return cls(settings.ConnectionSettings(section))

  def __enter__(self):
    """Starts a transaction, returning the Connector itself."""
    return self.BeginTransaction()

  def __exit__(self, exc_type, _exc_value, _exc_traceback):
    """End of transaction: commits on success, or rolls back on failure."""
    try:
      if self.in_transaction:
        if exc_type:
          self.rollback()
        else:
          try:
            self.commit()
          except Exception:
            self.rollback()
            raise
    finally:
      self.Destroy()

  def _InitConnection(self):
    params = dict(self.connection_params)
    backend = params.pop('backend', 'mysql')
    try:
      module = BACKENDS[backend]
    except KeyError:
      raise ValueError('Unknown database backend %r.' % backend)
    self.connection = module.Connect(**params)
    self.connection.logger.debug('Connection opened.')

  def _Connection(self):
    """Returns the open connection, reconnecting when it was destroyed."""
    if self.connection is None:
      self._InitConnection()
    return self.connection

  def _Prepared(self):
    if self.sql is None:
      raise NotPreparedError('Prepare a statement before executing it.')
    return self.sql

  def _Run(self, sql, params=None):
    """Executes one statement and collects its result.

    Returns:
      sqlresult.ResultSet instance holding the fetched rows and counters.
    """
    connection = self._Connection()
    connection.LogQuery(sql, params)
    with contextlib.closing(connection.cursor()) as cursor:
      if params is None:
        cursor.execute(sql)
      else:
        cursor.execute(sql, params)
      rows = cursor.fetchall() if cursor.description is not None else ()
      return sqlresult.ResultSet(query=sql, rows=rows,
                                 affected=cursor.rowcount,
                                 insertid=cursor.lastrowid)

  def Destroy(self):
    """Closes the connection to the database.

    Inside a transaction the close is postponed until the transaction is
    committed or rolled back.
    """
    if self.connection is None:
      return
    if self.in_transaction:
      self._destroy_pending = True
      return
    self.connection.logger.debug('Connection closed.')
    self.connection.close()
    self.connection = None

  def Prepare(self, sql, params=None):
    """Sets the SQL string and parameters to be bound.

    Arguments:
      @ sql: str
        The SQL statement to execute.
      % params: dict / list ~~ None
        The parameters to bind with the statement. MultiModify expects a
        list holding one parameter set per statement.

    Returns:
      Connector: this instance, for chaining.
    """
    self._Connection()
    self.sql = sql
    self.params = params
    return self

  def RowCount(self):
    """Returns the number of rows for the prepared query.

    A `SELECT *` query is counted by running it as `SELECT COUNT(*)`. Any
    other statement is executed and the driver's row count is returned; for
    drivers that report no count on queries, the fetched rows are counted.
    The prepared statement is left unchanged and the connection stays open.
    """
    sql = self._Prepared()
    if builder.SELECT_ALL in sql:
      count = self._Run(builder.CountStatement(sql), self.params).Scalar()
      return int(count or 0)
    result = self._Run(sql, self.params)
    if result.affected < 0:
      return len(result)
    return result.affected

  def Modify(self):
    """Executes the prepared INSERT, UPDATE or DELETE statement.

    The insert id the driver reports is kept for LastInsertId.

    Returns:
      bool: True, driver errors are raised.
    """
    sql = self._Prepared()
    try:
      result = self._Run(sql, self.params)
    finally:
      self.Destroy()
    if result.insertid:
      self.insertid = result.insertid
    return True

  def Query(self):
    """Returns the first column of the first row, or None without rows."""
    sql = self._Prepared()
    try:
      result = self._Run(sql, self.params)
    finally:
      self.Destroy()
    return result.Scalar()

  def LastInsertId(self):
    """Returns the id generated by the last insert.

    This is the id the driver reported for the last Modify. When there is
    none, the database is asked for it.

    After a multi-row insert such as BulkInsert the backends differ: MySQL
    reports the id of the first inserted row, SQLite that of the last.
    """
    if self.insertid is not None:
      return self.insertid
    query = self._Connection().LAST_INSERT_ID_QUERY
    return int(self.Prepare(query).Query() or 0)

  def Select(self, multi=False):
    """Selects records with the prepared query.

    Arguments:
      % multi: bool ~~ False
        If True, the list of rows is always returned.

    Returns:
      list of dict: with `multi`, or when more than one row was selected.
      dict: the single selected row, or an empty dict for no rows.
    """
    sql = self._Prepared()
    try:
      result = self._Run(sql, self.params)
    finally:
      self.Destroy()
    return result.Shape(multi)

  def _VerifyTable(self, table):
    if not self._Connection().TableExists(table):
      raise TableNotFoundError(TABLE_NOT_FOUND % table)

  def _PrimaryKey(self, table):
    primary_key = self.connection.PrimaryKey(table)
    if primary_key is None:
      raise PrimaryKeyError('Table %r has no primary key.' % table)
    return primary_key

  def Delete(self, table, record_id):
    """Deletes the record whose primary key equals `record_id`.

    Raises:
      TableNotFoundError: the table does not exist.
      PrimaryKeyError: the table has no primary key.
    """
    self._VerifyTable(table)
    sql, params = builder.DeleteStatement(
        table, self._PrimaryKey(table), record_id,
        self.connection.EscapeField, self.connection.Placeholder)
    return self.Prepare(sql, params).Modify()

  def QuickInsert(self, table, values):
    """Inserts one record given as a dictionary of column values.

    Raises:
      TableNotFoundError: the table does not exist.
      ValueError: no values were given.
    """
    self._VerifyTable(table)
    sql, params = builder.InsertStatement(
        table, values, self.connection.EscapeField, self.connection.Placeholder)
    return self.Prepare(sql, params).Modify()

  def QuickUpdate(self, table, record_id, values):
    """Updates the record whose primary key equals `record_id`.

    Raises:
      TableNotFoundError: the table does not exist.
      PrimaryKeyError: the table has no primary key.
      ValueError: no values were given.
    """
    self._VerifyTable(table)
    sql, params = builder.UpdateStatement(
        table, self._PrimaryKey(table), record_id, values,
        self.connection.EscapeField, self.connection.Placeholder)
    return self.Prepare(sql, params).Modify()

  def BulkInsert(self, table, rows):
    """Inserts many records, given as a list of dictionaries, at once.

    All rows must have the same columns as the first one.

    Raises:
      TableNotFoundError: the table does not exist.
      ValueError: no rows were given, or their columns differ.
    """
    self._VerifyTable(table)
    sql, params = builder.BulkInsertStatement(
        table, rows, self.connection.EscapeField, self.connection.Placeholder)
    return self.Prepare(sql, params).Modify()

  def MultiModify(self):
    """Executes the prepared statements, which are separated by `;`.

    Statement `n` is bound to the `n`th parameter set of the prepared
    parameters, counting empty statements too; statements without one are
    executed without parameters. Empty statements are skipped.

    Returns:
      bool: whether every statement was executed.
    """
    statements = builder.SplitStatements(self._Prepared())
    if isinstance(self.params, dict):
      raise TypeError('MultiModify takes a list of parameter sets.')
    param_sets = list(self.params or ())
    executed = 0
    try:
      for position, statement in statements:
        params = (param_sets[position] if position < len(param_sets)
                  else None)
        self._Run(statement, params)
        executed += 1
    finally:
      self.Destroy()
    return executed == len(statements)

  def BeginTransaction(self):
    """Starts a transaction, turning off autocommit until it ends.

    Raises:
      TransactionError: a transaction is already open.

    Returns:
      Connector: this instance, for chaining.
    """
    if self.in_transaction:
      raise TransactionError(
          'A transaction is already open for this connector.')
    self._Connection().begin()
    self.in_transaction = True
    return self

  def commit(self):
    """Commits the open transaction.

    Raises:
      TransactionError: there is no open transaction.
    """
    if not self.in_transaction:
      raise TransactionError('There is no active transaction to commit.')
    self.connection.commit()
    self.connection.logger.debug('Transaction committed.')
    self._EndTransaction()
    return True

  def rollback(self):
    """Rolls back the open transaction.

    Raises:
      TransactionError: there is no open transaction.
    """
    if not self.in_transaction:
      raise TransactionError('There is no active transaction to roll back.')
    self.connection.rollback()
    self.connection.LogRollback()
    self._EndTransaction()
    return True

  def _EndTransaction(self):
    self.in_transaction = False
    if self._destroy_pending:
      self._destroy_pending = False
      self.Destroy()
