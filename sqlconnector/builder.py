#!/usr/bin/python3
"""SQL statement assembly for the Connector's quick operations.

Every function here is pure: it receives the identifier quoting function and
the placeholder renderer of a backend connection, and returns the statement
together with the mapping of named parameters to bind. Values never end up
in the SQL text.
"""

# Standard modules
import re

SELECT_ALL = ' * '
COUNT_ALL = ' COUNT(*) '
PRIMARY_KEY_PARAM = '_primary_key'
STATEMENT_SEPARATOR = ';'
NON_WORD = re.compile(r'\W')


def ParamName(column, row=None):
  """Returns the bind parameter name for a column, optionally row-suffixed.

  Characters that cannot occur in a named parameter are replaced by `_`.
  """
  name = NON_WORD.sub('_', column)
  if row is None:
    return name
  return '%s_%d' % (name, row)


def InsertStatement(table, values, field_escape, placeholder):
  """Builds a single row INSERT statement.

  Arguments:
    @ table: str
      Name of the table to insert into.
    @ values: dict
      Column names mapped to the values to insert.
    @ field_escape: callable
      Quotes table and column names.
    @ placeholder: callable
      Renders the named parameter marker for a parameter name.

  Raises:
    ValueError: no values were given, or two columns share a parameter name.

  Returns:
    (str, dict): the statement and its parameters.
  """
  if not values:
    raise ValueError('Must insert 1 or more value')
  columns = list(values)
  params = _Params((ParamName(column), values[column]) for column in columns)
  sql = 'INSERT INTO %s (%s) VALUES (%s)' % (
      field_escape(table),
      ', '.join(map(field_escape, columns)),
      ', '.join(placeholder(ParamName(column)) for column in columns))
  return sql, params


def UpdateStatement(table, primary_key, record_id, values,
                    field_escape, placeholder):
  """Builds an UPDATE statement for the record with the given primary key.

  Returns:
    (str, dict): the statement and its parameters.
  """
  if not values:
    raise ValueError('Must update 1 or more value')
  columns = list(values)
  params = _Params(
      [(ParamName(column), values[column]) for column in columns] +
      [(PRIMARY_KEY_PARAM, record_id)])
  sql = 'UPDATE %s SET %s WHERE %s = %s' % (
      field_escape(table),
      ', '.join('%s = %s' % (field_escape(column),
                             placeholder(ParamName(column)))
                for column in columns),
      field_escape(primary_key),
      placeholder(PRIMARY_KEY_PARAM))
  return sql, params


def BulkInsertStatement(table, rows, field_escape, placeholder):
  """Builds one multi-row INSERT statement.

  The column list is taken from the first row. Each following row must carry
  exactly the same columns; row `i` binds its values as `<column>_<i>`.

  Raises:
    ValueError: no rows were given, or the rows do not share their columns.

  Returns:
    (str, dict): the statement and its parameters.
  """
  if not rows:
    raise ValueError('Must insert 1 or more rows')
  columns = list(rows[0])
  if not columns:
    raise ValueError('Must insert 1 or more value')
  pairs = []
  groups = []
  for index, row in enumerate(rows):
    if set(row) != set(columns):
      raise ValueError('Row %d has columns %r, expected %r.' % (
          index, sorted(row), sorted(columns)))
    names = [ParamName(column, index) for column in columns]
    pairs.extend(zip(names, (row[column] for column in columns)))
    groups.append('(%s)' % ', '.join(map(placeholder, names)))
  sql = 'INSERT INTO %s (%s) VALUES %s' % (
      field_escape(table),
      ', '.join(map(field_escape, columns)),
      ', '.join(groups))
  return sql, _Params(pairs)


def DeleteStatement(table, primary_key, record_id, field_escape, placeholder):
  """Builds a DELETE statement for the record with the given primary key."""
  sql = 'DELETE FROM %s WHERE %s = %s' % (
      field_escape(table),
      field_escape(primary_key),
      placeholder(PRIMARY_KEY_PARAM))
  return sql, {PRIMARY_KEY_PARAM: record_id}


def CountStatement(sql):
  """Rewrites the `SELECT *` projection of `sql` to `SELECT COUNT(*)`.

  Only the first ` * ` is replaced, so multiplications in later clauses are
  left alone.
  """
  return sql.replace(SELECT_ALL, COUNT_ALL, 1)


def SplitStatements(sql):
  """Splits `sql` on semicolons, dropping empty statements.

  Returns:
    list of (position, statement) tuples, where position counts every
    separated part of `sql`, the dropped empty ones included.
  """
  parts = sql.split(STATEMENT_SEPARATOR)
  statements = enumerate(part.strip() for part in parts)
  return [(position, statement) for position, statement in statements
          if statement]


def _Params(pairs):
  """Collects (name, value) pairs, refusing duplicate parameter names."""
  params = {}
  for name, value in pairs:
    if name in params:
      raise ValueError('Parameter name %r is used by more than one column.'
                       % name)
    params[name] = value
  return params
