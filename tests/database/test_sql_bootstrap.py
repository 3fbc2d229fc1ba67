from pathlib import Path

from src.hrms_workflow.hrms_workflow.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_splitter_ignores_semicolons_in_quotes_and_comments():
    sql = """
    -- first; comment
    INSERT INTO t(a) VALUES('x;y');
    INSERT INTO t(a) VALUES("p;q"); -- trailing; comment
    SELECT 1
    """

    stmts = list(_iter_sql_statements(sql))

    assert stmts == [
        "INSERT INTO t(a) VALUES('x;y')",
        'INSERT INTO t(a) VALUES("p;q")',
        "SELECT 1",
    ]


def test_strip_create_database_and_use():
    sql = "CREATE DATABASE IF NOT EXISTS hrms_db;\nUSE hrms_db;\nCREATE TABLE a (id INT);\n"

    stmts = list(_iter_sql_statements(_strip_create_db_and_use(sql)))

    assert stmts == ["CREATE TABLE a (id INT)"]


def test_schema_defines_workflow_tables():
    stmts = list(_iter_sql_statements(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))))
    created = [s.split("(")[0].split()[-1] for s in stmts if s.upper().startswith("CREATE TABLE")]

    assert created == ["departments", "employees", "approval_requests", "notifications", "audit_logs"]
