"""Detect SQL built from dynamic strings and raw SQL usage."""

from __future__ import annotations

from typing import Collection, FrozenSet, List, Mapping, Optional

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import call_arguments, tagged_template
from jsast.utils.patterns import CallTarget, contains_keyword, is_dynamic_string, match_call

from . import BaseRule, Category, Rule

SQL_KEYWORDS = ("SELECT", "INSERT", "UPDATE", "DELETE", "CREATE", "DROP", "ALTER", "TRUNCATE")

SQL_METHODS = frozenset({"query", "execute", "exec", "run", "all", "where"})
SQLITE_METHODS = frozenset({"run", "exec", "all"})
PG_METHODS = frozenset({"query"})
PRISMA_RAW_METHODS = frozenset({"$queryRaw", "$executeRaw"})
BARE_SQL_METHODS = frozenset({"query", "execute", "exec"})

DB_CLIENT_NAMES = ("mysql", "mysql2", "pg", "sqlite3", "sequelize", "connection", "pool", "client", "db")
MODEL_NAMES = ("User", "Product", "Order")

SQL_INJECTION_RECEIVERS: Mapping[str, FrozenSet[str]] = {
    **{name: SQL_METHODS for name in DB_CLIENT_NAMES},
    **{name: frozenset({"where"}) for name in MODEL_NAMES},
    "require('mysql')": PG_METHODS,
    "require('mysql2')": PG_METHODS,
    "require('pg')": PG_METHODS,
    "require('sqlite3')": SQL_METHODS,
    "new Client()": PG_METHODS,
    "new pg.Client()": SQL_METHODS,
    "pg.Client": PG_METHODS,
    "require('pg').Client": PG_METHODS,
    "require('pg').Client()": PG_METHODS,
    "new Database()": SQLITE_METHODS,
    "sqlite3.Database": SQLITE_METHODS,
    "require('sqlite3').Database": SQLITE_METHODS,
    "require('sqlite3').Database()": SQLITE_METHODS,
    "prisma": PRISMA_RAW_METHODS,
}

RAW_SQL_METHODS = frozenset({"query", "run", "execute", "exec", "all"})

RAW_SQL_RECEIVERS: Mapping[str, FrozenSet[str]] = {
    **{
        name: RAW_SQL_METHODS
        for name in ("sequelize", "connection", "manager", "entityManager", "mysql", "mysql2", "pg", "sqlite3")
    },
    **{
        f"require('{module}')": RAW_SQL_METHODS
        for module in ("sequelize", "mysql", "mysql2", "pg", "sqlite3")
    },
    "new Client()": PG_METHODS,
    "knex": frozenset({"raw"}),
    "require('knex')": frozenset({"raw"}),
    "prisma": PRISMA_RAW_METHODS,
}

RECEIVER_LABELS: Mapping[str, str] = {
    "require('mysql')": "mysql",
    "require('mysql2')": "mysql2",
    "require('pg')": "pg",
    "require('sqlite3')": "sqlite3",
    "require('sequelize')": "sequelize",
    "require('knex')": "knex",
    "new Client()": "pg.Client",
    "new pg.Client()": "pg.Client",
    "require('pg').Client": "pg.Client",
    "require('pg').Client()": "pg.Client",
    "new Database()": "sqlite3.Database",
    "require('sqlite3').Database": "sqlite3.Database",
    "require('sqlite3').Database()": "sqlite3.Database",
}


def sql_argument(node: Node) -> Optional[Node]:
    """Return the SQL text carrier: the template of a tagged call, else the first argument."""

    template = tagged_template(node)
    if template is not None:
        return template
    arguments = call_arguments(node)
    return arguments[0] if arguments else None


def describe_sink(target: CallTarget, labels: Mapping[str, str] = RECEIVER_LABELS) -> str:
    if target.receiver is None:
        return target.method
    return f"{labels.get(target.receiver, target.receiver)}.{target.method}"


class DetectSqlInjectionRule(BaseRule):
    """Flag database calls whose SQL text is concatenated or interpolated."""

    name = "detect-sql-injection"
    description = "Detect SQL injection through dynamically concatenated query strings"
    severity = Severity.ERROR
    category = Category.SQL_INJECTION

    def __init__(
        self,
        receivers: Mapping[str, Collection[str]] = SQL_INJECTION_RECEIVERS,
        bare: Collection[str] = BARE_SQL_METHODS,
    ) -> None:
        self._receivers = receivers
        self._bare = frozenset(bare)

    def check(self, node: Node) -> List[RuleFinding]:
        target = match_call(node, self._receivers, self._bare)
        if target is None or not is_dynamic_string(sql_argument(node)):
            return []
        return [
            self.finding(
                node,
                f"SQL injection vulnerability: {describe_sink(target)} uses dynamically concatenated "
                "SQL string, vulnerable to SQL injection",
            )
        ]


class AvoidRawSqlRule(BaseRule):
    """Flag raw SQL text passed to drivers instead of a query builder."""

    name = "avoid-raw-sql"
    description = "Discourage raw SQL strings in favour of ORM query builders"
    severity = Severity.WARNING
    category = Category.SQL_INJECTION

    def __init__(
        self,
        receivers: Mapping[str, Collection[str]] = RAW_SQL_RECEIVERS,
        keywords: Collection[str] = SQL_KEYWORDS,
    ) -> None:
        self._receivers = receivers
        self._keywords = tuple(keyword.upper() for keyword in keywords)

    def check(self, node: Node) -> List[RuleFinding]:
        target = match_call(node, self._receivers)
        if target is None or not contains_keyword(sql_argument(node), self._keywords):
            return []
        return [
            self.finding(
                node,
                f"Avoid using raw SQL: {describe_sink(target)} uses raw SQL string, "
                "consider using ORM query builders instead",
            )
        ]


def get_rules() -> List[Rule]:
    return [DetectSqlInjectionRule(), AvoidRawSqlRule()]
