def test_mongodb_injection_flags_direct_identifier(scan):
    issues = scan("db.collection.find({ name: userInput })", "detect-mongodb-injection")

    assert len(issues) == 1
    assert "db.collection.find" in issues[0].message
    assert "consider using $eq operator" in issues[0].message


def test_mongodb_injection_ignores_operator_guarded_values(scan):
    code = """
db.collection.find({ name: { $eq: userInput } });
User.find({ age: { $gt: minAge }, tags: { $in: tags } });
Product.findOne({ _id: new ObjectId(id) });
Order.find({ status: 'open' });
collection.find({ title: { $regex: pattern } });
"""

    assert scan(code, "detect-mongodb-injection") == []


def test_mongodb_injection_counts_each_logical_clause(scan):
    code = "User.find({ $or: [{ email: email }, { username: username }] })"

    issues = scan(code, "detect-mongodb-injection")

    assert len(issues) == 2


def test_mongodb_injection_counts_each_and_clause(scan):
    issues = scan("User.find({ $and: [{ a: x }, { b: y }] })", "detect-mongodb-injection")

    assert len(issues) == 2
    assert all("User.find" in issue.message for issue in issues)


def test_mongodb_injection_recurses_into_plain_nested_objects(scan):
    issues = scan("User.findOne({ address: { city: userCity } })", "detect-mongodb-injection")

    assert len(issues) == 1


def test_mongodb_injection_flags_dynamic_where(scan):
    code = """
User.find({ $where: `this.name == '${name}'` });
User.find({ $where: 'this.age > 18' });
"""

    issues = scan(code, "detect-mongodb-injection")

    assert len(issues) == 1
    assert "$where operator with dynamic content" in issues[0].message
    assert issues[0].line == 2


def test_mongodb_injection_ignores_unknown_receivers(scan):
    assert scan("items.find({ name: userInput })", "detect-mongodb-injection") == []
