def test_inner_html_assignment_with_dynamic_value(scan):
    code = """
element.innerHTML = userInput;
element.innerHTML += `<p>${message}</p>`;
elements[0].innerHTML = getContent();
element.innerHTML = '<p>static</p>';
element.textContent = userInput;
"""

    issues = scan(code, "avoid-dangerously-set-innerhtml")

    assert [issue.line for issue in issues] == [2, 3, 4]
    assert issues[0].message.startswith("Unsafe innerHTML assignment")


def test_dangerously_set_inner_html_in_jsx(scan):
    code = """
<div dangerouslySetInnerHTML={{ __html: userInput }} />;
<div dangerouslySetInnerHTML={{ __html: '<b>ok</b>' }} />;
"""

    issues = scan(code, "avoid-dangerously-set-innerhtml", filename="component.jsx")

    assert len(issues) == 1
    assert issues[0].message.startswith("Unsafe dangerouslySetInnerHTML")
    assert issues[0].line == 2
    assert issues[0].column == 5


def test_unsafe_html_flags_res_send_with_markup(scan):
    code = """
res.send('<div>' + userInput + '</div>');
res.send(renderPage(user));
res.send('Hello ' + name);
res.send('<p>static</p>');
"""

    issues = scan(code, "avoid-unsafe-html")

    assert [issue.line for issue in issues] == [2, 3]
    assert issues[0].message == "Avoid using res.send with dynamic HTML content. This may lead to XSS vulnerabilities."


def test_unsafe_html_flags_dom_sinks(scan):
    code = """
document.write(`<div>${content}</div>`);
document.write(content);
el.insertAdjacentHTML('beforeend', '<li>' + item + '</li>');
el.insertAdjacentHTML('beforeend', '<li>fixed</li>');
el.outerHTML = `<section>${body}</section>`;
el.outerHTML = 'plain ' + text;
"""

    issues = scan(code, "avoid-unsafe-html")

    assert [issue.line for issue in issues] == [2, 4, 6]
    assert "insertAdjacentHTML" in issues[1].message
    assert "outerHTML" in issues[2].message


def test_unsafe_html_flags_dynamic_jsx_children(scan):
    code = """
function UserCard({ user, count, isActive }) {
  return (
    <div>
      <span>{user.name}</span>
      {count}
      {42}
      {isActive ? 'Active' : 'Inactive'}
      {`Hello ${user.first}`}
      {null}
    </div>
  );
}
"""

    issues = scan(code, "avoid-unsafe-html", filename="card.jsx")

    assert [issue.line for issue in issues] == [6, 9, 5]
    assert issues[0].message == (
        "Avoid rendering untrusted input in JSX without proper escaping. This may lead to XSS vulnerabilities."
    )
    assert issues[2].column == 12


def test_unsafe_html_handles_tsx(scan):
    code = """
const Greeting = ({ name }: { name: string }) => <p>{name}</p>;
"""

    issues = scan(code, "avoid-unsafe-html", filename="greeting.tsx")

    assert len(issues) == 1


def test_no_document_write_flags_dynamic_arguments(scan):
    code = """
document.write(userInput);
document.writeln('<p>' + text + '</p>');
document.write('static');
"""

    issues = scan(code, "no-document-write")

    assert [issue.line for issue in issues] == [2, 3]
    assert "document.writeln" in issues[1].message
