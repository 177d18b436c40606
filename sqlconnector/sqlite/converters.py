#!/usr/bin/python3
"""Date and time conversion between Python and SQLite.

Dates are stored in their ISO-8601 notation, datetimes as ISO-8601 in UTC. On
the way back, columns declared DATE, DATETIME or TIMESTAMP are converted to
`datetime.date` and timezone aware `datetime.datetime` objects.
"""

# Standard modules
import datetime
import sqlite3

# Third-party modules
import pytz

INTERPRET_AS_UTC = pytz.utc.localize


def AdaptDate(date_obj):
  """Adapts a datetime.date object to its ISO-8601 date notation."""
  return date_obj.isoformat()


def AdaptDatetime(date_obj):
  """Adapts a datetime.datetime object to ISO-8601 date/time in UTC.

  Naive datetime objects are taken to be in UTC already.
  """
  if date_obj.tzinfo is None:
    date_obj = INTERPRET_AS_UTC(date_obj)
  return date_obj.astimezone(pytz.utc).isoformat(' ')


def ConvertDate(value):
  """Converts an SQLite DATE field to a datetime.date object."""
  return datetime.date.fromisoformat(value.decode('ascii')[:10])


def ConvertTimestamp(value):
  """Converts an SQLite DATETIME/TIMESTAMP field to an aware datetime.

  Values stored without an offset are interpreted as UTC.
  """
  stamp = datetime.datetime.fromisoformat(value.decode('ascii'))
  if stamp.tzinfo is None:
    return INTERPRET_AS_UTC(stamp)
  return stamp.astimezone(pytz.utc)


sqlite3.register_adapter(datetime.date, AdaptDate)
sqlite3.register_adapter(datetime.datetime, AdaptDatetime)
sqlite3.register_converter('DATE', ConvertDate)
sqlite3.register_converter('DATETIME', ConvertTimestamp)
sqlite3.register_converter('TIMESTAMP', ConvertTimestamp)
