def test_no_eval_flags_any_eval_call(scan):
    code = """
eval(userCode);
eval('1 + 1');
"""

    issues = scan(code, "no-eval")

    assert len(issues) == 2
    assert issues[0].message == (
        "Avoid using eval: eval executes arbitrary code and can lead to code injection vulnerabilities"
    )


def test_no_eval_flags_string_timers_only(scan):
    code = """
setTimeout('doSomething()', 100);
setInterval(`tick(${id})`, 1000);
setTimeout(() => doSomething(), 100);
setInterval(function () { tick(); }, 1000);
setTimeout(handler, 10);
"""

    issues = scan(code, "no-eval")

    assert [issue.line for issue in issues] == [2, 3]
    assert "setTimeout" in issues[0].message


def test_no_eval_ignores_methods_named_eval(scan):
    assert scan("sandbox.eval(code);", "no-eval") == []
