#!/usr/bin/python3
"""Connection settings read from ini files.

A settings file holds one section per database, for example:

  [database]
  backend = mysql
  host = localhost
  user = shop
  password = secret
  database = shop
  debug = False
"""

# Standard modules
import configparser
import os


class Error(Exception):
  """Superclass used for inheritance and external exception handling."""


class ConfigError(Error):
  """The settings are incomplete or hold an invalid value."""


class NotExistError(Error):
  """The requested settings file or section does not exist."""


class SettingsManager:
  def __init__(self, filename, path=None):
    """Reads connection settings from an ini file.

    Arguments:
      @ filename: str
        Name of the file, optionally without the extension; defaults to .ini
      % path: str, Optional
        Directory of the settings file, used if filename is relative, eg does
        not start with '/'

    Raises:
      NotExistError: the settings file does not exist.
    """
    extension = '' if filename.endswith(('.ini', '.conf')) else '.ini'
    self.filename = filename + extension
    if path and not os.path.isabs(self.filename):
      self.file_location = os.path.join(path, self.filename)
    else:
      self.file_location = self.filename
    if not os.path.isfile(self.file_location):
      raise NotExistError(
          'Settings file %r does not exist.' % self.file_location)
    self.mtime = None
    self.config = None
    self.options = {}
    self.Read()

  def Read(self):
    """Reads the config file and populates the options member.

    The file is only parsed again when its modification time changed.

    Returns:
      bool: whether the file was (re)read.
    """
    curtime = os.path.getmtime(self.file_location)
    if self.mtime is not None and self.mtime == curtime:
      return False
    self.config = configparser.ConfigParser(interpolation=None)
    self.config.read(self.file_location)
    self.options = {section: dict(self.config[section])
                    for section in self.config.sections()}
    self.mtime = curtime
    return True

  def ConnectionSettings(self, section='database'):
    """Returns the Connector parameters stored in `section`.

    Both `password`/`passwd` and `database`/`schema` are accepted as key
    names. `port` is converted to an integer and `debug` to a boolean.

    Raises:
      NotExistError: the section does not exist.
      ConfigError: no database is named, or a value does not convert.
    """
    self.Read()
    if not self.config.has_section(section):
      raise NotExistError('Settings file %r has no section [%s].' % (
          self.file_location, section))
    options = self.config[section]
    schema = options.get('database', options.get('schema'))
    if not schema:
      raise ConfigError('Section [%s] names no database.' % section)
    settings = {
        'backend': options.get('backend', 'mysql'),
        'host': options.get('host', 'localhost'),
        'user': options.get('user'),
        'passwd': options.get('password', options.get('passwd', '')),
        'schema': schema}
    try:
      if 'port' in options:
        settings['port'] = options.getint('port')
      settings['debug'] = options.getboolean('debug', False)
    except ValueError as error:
      raise ConfigError('Section [%s]: %s' % (section, error))
    if 'charset' in options:
      settings['charset'] = options['charset']
    return settings
