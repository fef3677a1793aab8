from smartflow.flow.visibility import visible_screens
from smartflow.models.template import Screen, Template, TemplateField
from smartflow.storage.db import connect, delete_template, init_schema, list_templates, load_template, save_template

def mkdb(tmp_path):
    conn = connect(tmp_path / "data")
    init_schema(conn)
    return conn

def test_round_trip_keeps_visibility(tmp_path, template):
    conn = mkdb(tmp_path)
    save_template(conn, template)
    loaded = load_template(conn, template.id)

    assert loaded.name == "Employment Agreement"
    assert [s.id for s in loaded.ordered_screens()] == [s.id for s in template.ordered_screens()]
    answers = {"employmentType": "full-time", "salary": 200000}
    assert [s.id for s in visible_screens(loaded, answers)] == [s.id for s in visible_screens(template, answers)]

def test_conditions_are_stored_as_json_text(tmp_path, template):
    conn = mkdb(tmp_path)
    save_template(conn, template)
    row = conn.execute(
        "SELECT conditions_json FROM screens WHERE template_id = ? AND screen_id = 'executive'",
        (template.id,),
    ).fetchone()
    assert row["conditions_json"].startswith('{"operator":"and"')
    loaded = load_template(conn, template.id)
    assert isinstance(loaded.screen("executive").conditions, str)

def test_broken_blob_is_stored_untouched(tmp_path):
    conn = mkdb(tmp_path)
    t = Template(id="t", screens=[Screen(id="s", conditions="{broken", fields=[TemplateField(name="a")])])
    save_template(conn, t)
    assert load_template(conn, "t").screen("s").conditions == "{broken"

def test_save_replaces_screens(tmp_path):
    conn = mkdb(tmp_path)
    save_template(conn, Template(id="t", name="v1", screens=[Screen(id="a"), Screen(id="b", order=1)]))
    save_template(conn, Template(id="t", name="v2", screens=[Screen(id="c")]))
    loaded = load_template(conn, "t")
    assert loaded.name == "v2"
    assert [s.id for s in loaded.screens] == ["c"]

def test_list_and_delete(tmp_path, template):
    conn = mkdb(tmp_path)
    save_template(conn, template)
    assert list_templates(conn) == [
        {"template_id": "employment-agreement", "name": "Employment Agreement", "screen_count": 5}
    ]
    assert delete_template(conn, template.id) is True
    assert delete_template(conn, template.id) is False
    assert load_template(conn, template.id) is None
    assert conn.execute("SELECT COUNT(*) FROM fields").fetchone()[0] == 0

def test_unparsed_mapping_conditions_are_stored_as_json(tmp_path):
    conn = mkdb(tmp_path)
    t = Template(id="t", screens=[Screen(id="s", conditions={"operator": "and", "rules": 3})])
    save_template(conn, t)
    stored = load_template(conn, "t").screen("s").conditions
    assert stored == '{"operator": "and", "rules": 3}'
    assert visible_screens(load_template(conn, "t"), {}) == []
