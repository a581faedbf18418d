def test_sql_injection_flags_dynamic_queries(scan):
    code = """
connection.query(`SELECT * FROM users WHERE id = ${userId}`);
pool.query("SELECT * FROM users WHERE name = '" + name + "'");
db.run(`DELETE FROM sessions WHERE id = ${id}`);
query(`SELECT * FROM orders WHERE id = ${orderId}`);
"""

    issues = scan(code, "detect-sql-injection")

    assert [issue.line for issue in issues] == [2, 3, 4, 5]
    assert issues[0].message == (
        "SQL injection vulnerability: connection.query uses dynamically concatenated SQL string, "
        "vulnerable to SQL injection"
    )
    assert issues[3].message.startswith("SQL injection vulnerability: query uses")


def test_sql_injection_ignores_parameterized_queries(scan):
    code = """
connection.query('SELECT * FROM users WHERE id = ?', [userId]);
pool.query(`SELECT * FROM users`);
client.query('SELECT * FROM users WHERE id = $1', [id]);
logger.query(`SELECT ${x}`);
"""

    assert scan(code, "detect-sql-injection") == []


def test_sql_injection_resolves_require_and_model_receivers(scan):
    code = """
require('pg').query(`SELECT * FROM t WHERE id = ${id}`);
require('pg').Client().query("SELECT * FROM t WHERE id = " + id);
User.where(`name = '${name}'`);
User.query(`SELECT ${name}`);
"""

    issues = scan(code, "detect-sql-injection")

    assert len(issues) == 3
    assert "pg.query" in issues[0].message
    assert "pg.Client.query" in issues[1].message
    assert "User.where" in issues[2].message


def test_sql_injection_flags_interpolated_prisma_raw_query(scan):
    code = """
prisma.$queryRaw`SELECT * FROM users WHERE id = ${id}`;
prisma.$queryRaw`SELECT * FROM users`;
"""

    issues = scan(code, "detect-sql-injection")

    assert len(issues) == 1
    assert "prisma.$queryRaw" in issues[0].message


def test_avoid_raw_sql_flags_keyword_text(scan):
    code = """
sequelize.query('SELECT * FROM users');
connection.execute(`update users set name = ${name}`);
knex.raw('DROP TABLE users');
prisma.$executeRaw`DELETE FROM logs`;
mysql.query(prefix + suffix);
"""

    issues = scan(code, "avoid-raw-sql")

    assert [issue.line for issue in issues] == [2, 3, 4, 5, 6]
    assert issues[0].message == (
        "Avoid using raw SQL: sequelize.query uses raw SQL string, consider using ORM query builders instead"
    )
    assert "knex.raw" in issues[2].message


def test_avoid_raw_sql_ignores_builders_and_plain_text(scan):
    code = """
sequelize.query('show tables');
knex.select('*').from('users');
connection.query(`${statement}`);
cache.query('SELECT 1');
"""

    assert scan(code, "avoid-raw-sql") == []


def test_sql_injection_resolves_constructed_clients(scan):
    code = """
new Client().query(`SELECT * FROM t WHERE id = ${id}`);
new pg.Client().query("SELECT * FROM t WHERE id = " + id);
require('sqlite3').Database().run('DELETE FROM t WHERE id = ' + id);
new Database().exec(`DROP TABLE ${table}`);
sqlite3.Database.all('SELECT * FROM t WHERE id = ' + id);
"""

    issues = scan(code, "detect-sql-injection")

    assert [issue.line for issue in issues] == [2, 3, 4, 5, 6]
    assert "pg.Client.query" in issues[0].message
    assert "pg.Client.query" in issues[1].message
    assert "sqlite3.Database.run" in issues[2].message
    assert "sqlite3.Database.exec" in issues[3].message
    assert "sqlite3.Database.all" in issues[4].message


def test_sql_injection_ignores_other_methods_on_constructed_clients(scan):
    code = """
new Client().connect(`postgres://${host}`);
new Database().query(`SELECT ${x}`);
new Client().query('SELECT 1');
"""

    assert scan(code, "detect-sql-injection") == []
