#!/usr/bin/python3
"""SQL result abstraction module.

Classes:
  ResultSet: Holds the rows fetched for one statement, as dictionaries.

Error Classes:
  Error: Exception base class.
  FieldError: Field- index or name does not exist.
"""

# Standard modules
import operator


class Error(Exception):
  """Exception base class."""


class FieldError(Error, LookupError):
  """Field- index or name does not exist."""


class ResultSet:
  """SQL Result set - stores the query, the fetched rows, and other info.

  Members:
    @ affected - int
      Number of rows affected, as reported by the driver.
    @ insertid - int
      Auto-increment ID that was generated upon the last insert.
    @ query - str
      The executed query that gave this result set.
    @ rows - list of dict
      Fetched rows, one dictionary per row in field order.
    % fieldnames - tuple (read-only)
      Names of the fields in the result.
  """

  def __init__(self, query='', rows=None, affected=0, insertid=None):
    """Initializes a new ResultSet.

    Arguments:
      % query: str ~~ ''
        The query that was executed for this operation.
      % rows: iterable of mappings ~~ None
        The rows fetched from the driver's cursor.
      % affected: int ~~ 0
        Number of affected rows from this operation.
      % insertid: int ~~ None
        Auto-increment ID that was generated upon the last insert.
    """
    self.query = query
    self.affected = affected
    self.insertid = insertid
    self.rows = [dict(row) for row in rows or ()]
    self._fields = list(self.rows[0]) if self.rows else []

  def __eq__(self, other):
    """A ResultSet is equal to another ResultSet with the same rows."""
    if self is other:
      return True
    if isinstance(other, self.__class__):
      return (self.affected == other.affected and
              self.insertid == other.insertid and
              self.rows == other.rows)
    return False

  def __getitem__(self, item):
    """Returns a row or column from the ResultSet by either index or fieldname.

    Arguments:
      @ item: int / str
        Rownumber or fieldname:
        - If given a rownumber, the corresponding row dictionary is returned.
        - If given a fieldname, a tuple with the field's values is returned.
    """
    if isinstance(item, int):
      try:
        return self.rows[item]
      except IndexError:
        raise FieldError('Bad row index: %r.' % item)
    if item not in self._fields:
      raise FieldError('Bad field name: %r.' % item)
    return tuple(map(operator.itemgetter(item), self.rows))

  def __iter__(self):
    return iter(self.rows)

  def __len__(self):
    return len(self.rows)

  def __bool__(self):
    return bool(self.rows)

  def __repr__(self):
    return '%s instance: %d row%s' % (
        self.__class__.__name__, len(self.rows), 's'[len(self.rows) == 1:])

  @property
  def fieldnames(self):
    """Returns a tuple of the fieldnames that are in this ResultSet."""
    return tuple(self._fields)

  def Scalar(self):
    """Returns the first column of the first row, or None without rows."""
    if not self.rows:
      return None
    return next(iter(self.rows[0].values()), None)

  def Shape(self, multi=False):
    """Returns the rows in the shape the Connector's Select hands out.

    Arguments:
      % multi: bool ~~ False
        Always return the list of rows when True.

    Returns:
      list of dict: when `multi` is set, or more than one row was fetched.
      dict: the only row when exactly one was fetched, or an empty dict when
            there were none.
    """
    if multi or len(self.rows) > 1:
      return list(self.rows)
    if self.rows:
      return self.rows[0]
    return {}
