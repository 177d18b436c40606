#!/usr/bin/python3
"""Test suite for the Connector on the MySQL backend.

PyMySQL's network layer is replaced by mocks, so these tests check the
statements and parameters handed to the driver without a MySQL server.
"""

# Too many public methods
# pylint: disable=R0904

# Standard modules
import unittest
from unittest import mock

# Third-party modules
import pymysql

# Unittest target
from sqlconnector import connector
from sqlconnector.mysql import connection

PARAMS = {'host': 'db.example.com',
          'user': 'shop',
          'passwd': 'secret',
          'schema': 'shop'}


class MysqlTestCase(unittest.TestCase):
  """Connector on a PyMySQL connection that never touches the network."""

  def setUp(self):
    self.cursor = mock.MagicMock()
    self.cursor.__enter__.return_value = self.cursor
    self.cursor.description = None
    self.cursor.rowcount = 1
    self.cursor.lastrowid = 0
    driver = pymysql.connections.Connection
    patches = {
        'init': mock.patch.object(driver, '__init__', return_value=None),
        'begin': mock.patch.object(driver, 'begin'),
        'commit': mock.patch.object(driver, 'commit'),
        'rollback': mock.patch.object(driver, 'rollback'),
        'cursor': mock.patch.object(connection.Connection, 'cursor',
                                    return_value=self.cursor),
        'close': mock.patch.object(connection.Connection, 'close')}
    self.driver = {}
    for name, patch in patches.items():
      self.driver[name] = patch.start()
      self.addCleanup(patch.stop)
    self.connector = connector.Connector(PARAMS)

  def _TableFound(self, *rows):
    """Lets the table check succeed, followed by the given fetchone rows."""
    self.cursor.fetchone.side_effect = [{'Tables_in_shop': 'x'}] + list(rows)

  def _Executed(self):
    return self.cursor.execute.call_args_list


class ConnectionTests(MysqlTestCase):

  def testConnectArguments(self):
    """[MySQL] The connection parameters are mapped onto PyMySQL's"""
    self.driver['init'].assert_called_once_with(
        host='db.example.com', user='shop', password='secret',
        database='shop', port=3306, charset='utf8mb4',
        cursorclass=pymysql.cursors.DictCursor, autocommit=True)

  def testExtraArguments(self):
    """[MySQL] Port, charset and driver options are passed along"""
    connector.Connector(dict(PARAMS, port='3307', charset='latin1',
                             connect_timeout=5))
    self.driver['init'].assert_called_with(
        host='db.example.com', user='shop', password='secret',
        database='shop', port=3307, charset='latin1',
        cursorclass=pymysql.cursors.DictCursor, autocommit=True,
        connect_timeout=5)

  def testSchemaDefaultsToUser(self):
    """[MySQL] Without a schema the database named after the user is used"""
    connector.Connector({'user': 'shop', 'passwd': 'secret'})
    self.assertEqual(self.driver['init'].call_args[1]['database'], 'shop')
    self.assertEqual(self.driver['init'].call_args[1]['host'], 'localhost')

  def testLogger(self):
    """[MySQL] The connection logs to a logger named after the database"""
    self.assertEqual(self.connector.connection.logger.name, 'mysql_shop')

  def testDriverErrors(self):
    """[MySQL] PyMySQL's error classes are available on the connection"""
    self.assertIs(connection.Connection.ProgrammingError,
                  pymysql.ProgrammingError)
    self.assertIs(connection.Connection.IntegrityError,
                  pymysql.err.IntegrityError)

  def testPlaceholder(self):
    """[MySQL] Named parameters use the pyformat style"""
    self.assertEqual(connection.Connection.Placeholder('name'), '%(name)s')

  def testEscapeField(self):
    """[MySQL] Identifiers are quoted with backticks"""
    escape = connection.Connection.EscapeField
    self.assertEqual(escape('author'), '`author`')
    self.assertEqual(escape('shop.author'), '`shop`.`author`')
    self.assertEqual(escape('odd`name'), '`odd``name`')
    self.assertEqual(escape('author.*'), '`author`.*')


class StatementTests(MysqlTestCase):

  def testTableCheck(self):
    """[MySQL] The table check escapes LIKE wildcards"""
    self._TableFound()
    self.connector.QuickInsert('order_line', {'amount': 3})
    self.assertEqual(self._Executed()[0],
                     mock.call('SHOW TABLES LIKE %s', ('order\\_line',)))

  def testMissingTable(self):
    """[MySQL] A table that SHOW TABLES does not list is reported missing"""
    self.cursor.fetchone.side_effect = [None]
    self.assertRaises(connector.TableNotFoundError,
                      self.connector.QuickInsert, 'customer', {'name': 'x'})

  def testQuickInsert(self):
    """[MySQL] QuickInsert binds every column as a named parameter"""
    self._TableFound()
    self.assertTrue(self.connector.QuickInsert(
        'customer', {'name': 'Elmer', 'e-mail': 'elmer@example.com'}))
    self.assertEqual(self._Executed()[-1], mock.call(
        'INSERT INTO `customer` (`name`, `e-mail`) '
        'VALUES (%(name)s, %(e_mail)s)',
        {'name': 'Elmer', 'e_mail': 'elmer@example.com'}))
    self.driver['close'].assert_called_once_with()
    self.assertIsNone(self.connector.connection)

  def testQuickUpdate(self):
    """[MySQL] QuickUpdate addresses the record through the PRIMARY key"""
    self._TableFound({'Key_name': 'PRIMARY', 'Column_name': 'customerID'})
    self.connector.QuickUpdate('customer', 12, {'name': 'Jan'})
    self.assertEqual(self._Executed()[1], mock.call(
        "SHOW KEYS FROM `customer` WHERE Key_name = 'PRIMARY'"))
    self.assertEqual(self._Executed()[-1], mock.call(
        'UPDATE `customer` SET `name` = %(name)s '
        'WHERE `customerID` = %(_primary_key)s',
        {'name': 'Jan', '_primary_key': 12}))

  def testQuickUpdateWithoutPrimaryKey(self):
    """[MySQL] A table without PRIMARY key cannot be updated by id"""
    self._TableFound(None)
    self.assertRaises(connector.PrimaryKeyError,
                      self.connector.QuickUpdate, 'log', 1, {'line': 'x'})

  def testDelete(self):
    """[MySQL] Delete removes the record through the PRIMARY key"""
    self._TableFound({'Key_name': 'PRIMARY', 'Column_name': 'ID'})
    self.assertTrue(self.connector.Delete('customer', 3))
    self.assertEqual(self._Executed()[-1], mock.call(
        'DELETE FROM `customer` WHERE `ID` = %(_primary_key)s',
        {'_primary_key': 3}))

  def testBulkInsert(self):
    """[MySQL] BulkInsert numbers the parameters of every row"""
    self._TableFound()
    self.connector.BulkInsert('customer', [{'name': 'Elmer', 'age': 24},
                                           {'age': 30, 'name': 'Jan'}])
    self.assertEqual(self._Executed()[-1], mock.call(
        'INSERT INTO `customer` (`name`, `age`) VALUES '
        '(%(name_0)s, %(age_0)s), (%(name_1)s, %(age_1)s)',
        {'name_0': 'Elmer', 'age_0': 24, 'name_1': 'Jan', 'age_1': 30}))

  def testPrepareWithoutParameters(self):
    """[MySQL] Statements without parameters are executed as-is"""
    self.connector.Prepare("DELETE FROM customer WHERE name LIKE 'a%'")
    self.connector.Modify()
    self.assertEqual(self._Executed()[-1],
                     mock.call("DELETE FROM customer WHERE name LIKE 'a%'"))

  def testMultiModify(self):
    """[MySQL] MultiModify pairs statements with their parameter sets"""
    self.connector.Prepare(
        'UPDATE a SET x = %(x)s; DELETE FROM b;', [{'x': 1}])
    self.assertTrue(self.connector.MultiModify())
    self.assertEqual(self._Executed(), [
        mock.call('UPDATE a SET x = %(x)s', {'x': 1}),
        mock.call('DELETE FROM b')])
    self.driver['close'].assert_called_once_with()


class ResultTests(MysqlTestCase):

  def _Rows(self, *rows):
    self.cursor.description = (('field',),)
    self.cursor.fetchall.return_value = list(rows)
    self.cursor.rowcount = len(rows)

  def testRowCountSelectAll(self):
    """[MySQL] RowCount counts a SELECT * with COUNT(*)"""
    self._Rows({'COUNT(*)': 5})
    self.connector.Prepare('SELECT * FROM customer WHERE age > %(age)s',
                           {'age': 18})
    self.assertEqual(self.connector.RowCount(), 5)
    self.assertEqual(self._Executed()[-1], mock.call(
        'SELECT COUNT(*) FROM customer WHERE age > %(age)s', {'age': 18}))
    self.driver['close'].assert_not_called()

  def testRowCountFromDriver(self):
    """[MySQL] RowCount reports the driver's row count otherwise"""
    self._Rows({'name': 'a'}, {'name': 'b'})
    self.connector.Prepare('SELECT name FROM customer')
    self.assertEqual(self.connector.RowCount(), 2)

  def testSelect(self):
    """[MySQL] Select hands out the dictionaries PyMySQL fetched"""
    self._Rows({'ID': 1, 'name': 'Elmer'})
    self.assertEqual(
        self.connector.Prepare('SELECT * FROM customer').Select(),
        {'ID': 1, 'name': 'Elmer'})
    self.driver['close'].assert_called_once_with()

  def testLastInsertIdFromDriver(self):
    """[MySQL] LastInsertId returns the id PyMySQL reported for the insert"""
    self._TableFound()
    self.cursor.lastrowid = 42
    self.connector.QuickInsert('customer', {'name': 'Elmer'})
    self.cursor.execute.reset_mock()
    self.assertEqual(self.connector.LastInsertId(), 42)
    self.cursor.execute.assert_not_called()

  def testBulkInsertLastInsertId(self):
    """[MySQL] After a bulk insert the first row's id is returned"""
    self._TableFound()
    self.cursor.lastrowid = 10
    self.connector.BulkInsert(
        'customer', [{'name': 'Elmer'}, {'name': 'Jan'}])
    self.assertEqual(self.connector.LastInsertId(), 10)

  def testLastInsertIdQuery(self):
    """[MySQL] Without a recorded insert, LAST_INSERT_ID() is queried"""
    self._Rows({'LAST_INSERT_ID()': 7})
    self.assertEqual(self.connector.LastInsertId(), 7)
    self.assertEqual(self._Executed()[-1],
                     mock.call('SELECT LAST_INSERT_ID()'))


class TransactionTests(MysqlTestCase):

  def testCommit(self):
    """[MySQL] Transactions are started and committed by PyMySQL"""
    self._TableFound()
    self.connector.BeginTransaction()
    self.driver['begin'].assert_called_once_with()
    self.connector.QuickInsert('customer', {'name': 'Elmer'})
    self.driver['close'].assert_not_called()
    self.connector.commit()
    self.driver['commit'].assert_called_once_with()
    self.driver['close'].assert_called_once_with()

  def testRollback(self):
    """[MySQL] Transactions are rolled back by PyMySQL"""
    with self.assertRaises(RuntimeError):
      with self.connector:
        raise RuntimeError('abort')
    self.driver['rollback'].assert_called_once_with()
    self.driver['commit'].assert_not_called()
    self.driver['close'].assert_called_once_with()


if __name__ == '__main__':
  unittest.main(testRunner=unittest.TextTestRunner(verbosity=2))
