import json

from smartflow.cli.__main__ import main

def run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err

def test_evaluate(capsys):
    conds = json.dumps({"operator": "and", "rules": [{"field": "age", "operator": "greaterThan", "value": "18"}]})
    assert run(capsys, "evaluate", "--conditions", conds, "--answers", '{"age": "21"}')[1].strip() == "true"
    assert run(capsys, "evaluate", "--conditions", conds, "--answers", '{"age": "abc"}')[1].strip() == "false"
    assert run(capsys, "evaluate", "--conditions", "{broken", "--answers", "{}")[1].strip() == "false"

def test_check_example(capsys, example_path):
    code, out, _ = run(capsys, "check", str(example_path))
    assert code == 0
    assert "conditions OK" in out

def test_check_reports_issues(capsys, tmp_path):
    p = tmp_path / "t.yaml"
    p.write_text(
        "id: t\n"
        "screens:\n"
        "  - id: s\n"
        "    conditions: {operator: and, rules: [{field: ghost, operator: isEmpty}]}\n"
    )
    code, out, _ = run(capsys, "check", str(p))
    assert code == 1
    assert "[unreachable-field]" in out

def test_walk(capsys, tmp_path, example_path):
    answers = tmp_path / "answers.yaml"
    answers.write_text("employmentType: part-time\nweeklyHours: 20\nsalary: 40000\n")
    code, out, _ = run(capsys, "walk", str(example_path), "--answers", str(answers))
    assert code == 0
    assert "- executive (Executive Terms) hidden" in out
    assert "    + weeklyHours = 20" in out

def test_import_list_and_walk_stored(capsys, tmp_path, example_path):
    data = str(tmp_path / "data")
    assert run(capsys, "import", str(example_path), "--data-dir", data)[0] == 0
    _, out, _ = run(capsys, "list", "--data-dir", data)
    assert out.startswith("employment-agreement\tEmployment Agreement\t5 screens")
    code, out, _ = run(capsys, "walk", "employment-agreement", "--data-dir", data)
    assert code == 0
    assert "+ company (Company Information)" in out

def test_fields(capsys, example_path):
    code, out, _ = run(capsys, "fields", str(example_path), "--screen", "company", "--field", "companyState")
    assert code == 0
    assert [line.split("\t")[0] for line in out.splitlines()] == ["companyName", "companyCountry"]

def test_errors_exit_2(capsys, tmp_path):
    code, _, err = run(capsys, "walk", "no-such-template", "--data-dir", str(tmp_path))
    assert code == 2
    assert "error:" in err

    code, _, err = run(capsys, "fields", "no-such-template", "--screen", "x", "--data-dir", str(tmp_path))
    assert code == 2

def test_operators(capsys):
    code, out, _ = run(capsys, "operators")
    rows = [line.split("\t") for line in out.splitlines()]
    assert code == 0
    assert len(rows) == 14
    assert ["isEmpty", "is empty", "-"] in rows
    assert ["greaterThan", "is greater than", "value"] in rows

def test_bad_setting_exits_2(capsys, monkeypatch, tmp_path):
    monkeypatch.setenv("SMARTFLOW_HTTP_TIMEOUT", "soon")
    code, _, err = run(capsys, "import", "https://example.com/nda.json", "--data-dir", str(tmp_path))
    assert code == 2
    assert "SMARTFLOW_HTTP_TIMEOUT" in err
