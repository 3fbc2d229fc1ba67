from __future__ import annotations

import json
import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_DEPARTMENTS = ("Administration", "Engineering", "Human Resources")

# Opening Casual leave balance for seeded employees.
DEMO_PAID_LEAVES = 12

# employee_id, name, login_type, department, designation, gender, employment_type, date_of_joining
DEMO_EMPLOYEES = (
    ("ADM001", "Admin Demo", "Admin", "Administration", "Administrator", "Female", "Confirmed", "2018-04-02"),
    ("CEO001", "CEO Demo", "CEO", "Administration", "Chief Executive Officer", "Male", "Confirmed", "2015-01-05"),
    ("HOD001", "Engineering HOD", "HOD", "Engineering", "Head of Department", "Male", "Confirmed", "2017-07-10"),
    ("HOD002", "HR HOD", "HOD", "Human Resources", "Head of Department", "Female", "Confirmed", "2019-03-18"),
    ("EMP001", "Priya Raman", "Employee", "Engineering", "Software Engineer", "Female", "Confirmed", "2021-06-01"),
    ("EMP002", "Arun Kumar", "Employee", "Engineering", "Software Engineer", "Male", "Probation", "2025-11-03"),
)


def _connect(db_config: dict, *, with_database: bool = True):
    target = DBConfig.from_dict(db_config)
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes and -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False
    prev = ""

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            prev = ch
            continue

        if escape:
            buf.append(ch)
            escape = False
            prev = ch
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            prev = ch
            continue

        if ch == "-" and prev == "-" and not in_single and not in_double:
            buf.pop()
            in_comment = True
            prev = ch
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            prev = ch
            continue

        buf.append(ch)
        prev = ch

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with closing(_connect(db_config, with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    schema_path = Path(schema_path)
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    with closing(_connect(db_config)) as conn:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    logger.info("Applied schema %s", schema_path.name)


def ensure_demo_employees(db_config: dict) -> None:
    """Idempotently insert demo departments and one employee per role."""
    with closing(_connect(db_config)) as conn:
        cur = conn.cursor(dictionary=True)

        dept_ids: dict[str, int] = {}
        for dept_name in DEMO_DEPARTMENTS:
            cur.execute("SELECT department_id FROM departments WHERE name=%s", (dept_name,))
            row = cur.fetchone()
            if row:
                dept_ids[dept_name] = int(row["department_id"])
            else:
                cur.execute("INSERT INTO departments (name) VALUES (%s)", (dept_name,))
                dept_ids[dept_name] = int(cur.lastrowid)

        for employee_id, name, login_type, dept, designation, gender, employment_type, joined in DEMO_EMPLOYEES:
            cur.execute(
                """
                INSERT INTO employees (
                    employee_id, name, login_type, department_id, designation,
                    gender, employment_type, date_of_joining, paid_leaves, compensatory_entries
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), login_type=VALUES(login_type),
                    department_id=VALUES(department_id), designation=VALUES(designation),
                    is_active=1
                """,
                (
                    employee_id,
                    name,
                    login_type,
                    dept_ids[dept],
                    designation,
                    gender,
                    employment_type,
                    joined,
                    DEMO_PAID_LEAVES,
                    json.dumps([]),
                ),
            )

        conn.commit()
    logger.info("Demo employees ready (%d)", len(DEMO_EMPLOYEES))


def list_tables(db_config: dict) -> list[str]:
    with closing(_connect(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
