from jsast.severity import Severity


def test_no_var_flags_var_declaration(scan):
    issues = scan("var x = 10", "no-var")

    assert len(issues) == 1
    assert issues[0].rule == "no-var"
    assert "`var` is not allowed" in issues[0].message
    assert issues[0].line == 1
    assert issues[0].column == 0
    assert issues[0].severity is Severity.WARNING
    assert issues[0].filename == "test.js"


def test_no_var_ignores_let_and_const(scan):
    assert scan("let a = 1;\nconst b = 2;", "no-var") == []


def test_no_var_reports_each_declaration_line(scan):
    issues = scan("let a = 1;\nvar b = 2;\nfunction f() {\n  var c = 3;\n}\n", "no-var")

    assert [issue.line for issue in issues] == [2, 4]
    assert issues[1].column == 2


def test_no_console_log_only_flags_log(scan):
    code = "console.log('debug');\nconsole.error('boom');\nconsole.warn('careful');\n"

    issues = scan(code, "no-console-log")

    assert len(issues) == 1
    assert issues[0].message == "Do not use console.log"
    assert issues[0].severity is Severity.NOTE


def test_no_console_log_ignores_tagged_templates(scan):
    assert scan("console.log`debug ${x}`;", "no-console-log") == []
