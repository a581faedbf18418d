def test_path_traversal_reports_each_dynamic_path_argument(scan):
    issues = scan("fs.rename(`./a/${x}`, `./b/${y}`)", "detect-path-traversal")

    assert len(issues) == 2
    assert issues[0].message == (
        "Path traversal vulnerability: fs.rename uses dynamically concatenated path, vulnerable to path traversal"
    )


def test_path_traversal_flags_namespaced_required_and_bare_calls(scan):
    code = """
fs.readFileSync('./uploads/' + filename);
require('fs').unlink(`/tmp/${name}`, done);
path.readFile(base + file);
readFile(`./data/${file}`);
"""

    issues = scan(code, "detect-path-traversal")

    assert [issue.line for issue in issues] == [2, 3, 4, 5]
    assert "require('fs').unlink" in issues[1].message


def test_path_traversal_ignores_static_paths(scan):
    code = """
fs.readFileSync('./config.json');
fs.writeFile(`./static/output.txt`, data);
fs.copyFile('./a.txt', './b.txt');
fs.readFile(filename);
storage.readFile(`./data/${file}`);
"""

    assert scan(code, "detect-path-traversal") == []


def test_path_traversal_checks_only_the_path_argument(scan):
    issues = scan("fs.writeFile('./out.txt', `${header}\\n${body}`)", "detect-path-traversal")

    assert issues == []


def test_unsafe_fs_access_covers_common_methods(scan):
    code = """
fs.copyFileSync(src + '.bak', `${dest}/copy`);
require('fs').readdir(`./${dir}`);
fs.open(`./${name}`);
"""

    issues = scan(code, "avoid-unsafe-fs-access")

    assert len(issues) == 3
    assert issues[0].message.startswith("Unsafe file system access: fs.copyFileSync")
    assert issues[2].line == 3


def test_path_traversal_flags_file_handle_methods(scan):
    code = """
new FileHandle().read(`./uploads/${p}`);
new FileHandle().read('./static');
new FileHandle().unlink(`./uploads/${p}`);
"""

    issues = scan(code, "detect-path-traversal")

    assert [issue.line for issue in issues] == [2]
    assert "new FileHandle().read" in issues[0].message
