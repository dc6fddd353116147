from __future__ import annotations

LEAD_FIELDS = [
    {"key": "companyName", "label": "Company Name", "type": "text", "required": True},
    {"key": "status", "label": "Status", "type": "select", "required": True, "options": ["New", "Contacted"]},
    {"key": "potentialValue", "label": "Potential Value", "type": "number", "required": False},
    {"key": "hot", "label": "Hot lead", "type": "checkbox", "required": True},
]


def _create_form(client, fields=LEAD_FIELDS):
    module = client.post("/api/modules", json={"name": "Sales", "icon": "TrendingUp"}).json()
    form = client.post(f"/api/modules/{module['id']}/forms", json={"name": "Leads"}).json()
    response = client.put(f"/api/forms/{form['id']}", json={"fields": fields})
    assert response.status_code == 200
    return module, response.json()


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_module_crud(client):
    response = client.post("/api/modules", json={"name": "Inventory", "icon": "Nonexistent"})
    assert response.status_code == 201
    module = response.json()
    assert module["icon"] == "Nonexistent"
    assert module["glyph"] == "box"

    response = client.put(f"/api/modules/{module['id']}", json={"icon": "Package"})
    assert response.json()["glyph"] == "package"

    assert client.delete(f"/api/modules/{module['id']}").status_code == 204
    assert client.get(f"/api/modules/{module['id']}").status_code == 404


def test_module_name_required(client):
    response = client.post("/api/modules", json={"description": "no name"})
    assert response.status_code == 400


def test_form_created_empty_then_fields_replaced(client):
    module = client.post("/api/modules", json={"name": "Sales"}).json()
    response = client.post(
        f"/api/modules/{module['id']}/forms",
        json={"name": "Leads", "fields": LEAD_FIELDS},
    )
    assert response.status_code == 201
    form = response.json()
    assert form["fields"] == []

    client.put(f"/api/forms/{form['id']}", json={"fields": LEAD_FIELDS})
    fetched = client.get(f"/api/forms/{form['id']}").json()
    assert [item["key"] for item in fetched["fields"]] == [
        "companyName",
        "status",
        "potentialValue",
        "hot",
    ]
    assert "options" not in fetched["fields"][0]
    assert fetched["fields"][1]["options"] == ["New", "Contacted"]


def test_field_list_with_unknown_type_rejected(client):
    _, form = _create_form(client)
    response = client.put(
        f"/api/forms/{form['id']}", json={"fields": [{"key": "a", "type": "color"}]}
    )
    assert response.status_code == 400
    assert client.get(f"/api/forms/{form['id']}").json()["fields"] == form["fields"]


def test_form_json_schema_export(client):
    _, form = _create_form(client)
    schema = client.get(f"/api/forms/{form['id']}/schema").json()
    assert schema["required"] == ["companyName", "status", "hot"]
    assert schema["properties"]["status"]["enum"] == ["New", "Contacted"]


def test_record_submission_coerces(client):
    _, form = _create_form(client)
    response = client.post(
        f"/api/forms/{form['id']}/records",
        json={"data": {"companyName": "Acme", "status": "New", "potentialValue": "2500"}},
    )
    assert response.status_code == 201
    record = response.json()
    assert record["form_id"] == form["id"]
    assert record["data"] == {
        "companyName": "Acme",
        "status": "New",
        "potentialValue": 2500,
        "hot": False,
    }

    listed = client.get(f"/api/forms/{form['id']}/records").json()
    assert [item["id"] for item in listed] == [record["id"]]


def test_record_submission_reports_first_error(client):
    _, form = _create_form(client)
    response = client.post(
        f"/api/forms/{form['id']}/records",
        json={"data": {"companyName": "Acme", "status": "Bogus", "potentialValue": "lots"}},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["field"] == "status"
    assert body["code"] == "invalid_field_type"
    assert client.get(f"/api/forms/{form['id']}/records").json() == []


def test_record_for_missing_form_is_404(client):
    response = client.post("/api/forms/999/records", json={"data": {}})
    assert response.status_code == 404


def test_delete_record(client):
    _, form = _create_form(client)
    record = client.post(
        f"/api/forms/{form['id']}/records",
        json={"data": {"companyName": "Acme", "status": "New"}},
    ).json()
    assert client.delete(f"/api/records/{record['id']}").status_code == 204
    assert client.get(f"/api/records/{record['id']}").status_code == 404


def test_template_render_and_preview(client):
    module, form = _create_form(client)
    response = client.post(
        f"/api/modules/{module['id']}/templates",
        json={
            "name": "Lead sheet",
            "form_id": form["id"],
            "content": "<p>{{companyName}} is {{status}}; hot: {{hot}}; owner: {{owner}}</p>",
            "styles": "p { color: #333; }",
        },
    )
    assert response.status_code == 201
    template = response.json()

    record = client.post(
        f"/api/forms/{form['id']}/records",
        json={"data": {"companyName": "A&B", "status": "New", "hot": True}},
    ).json()

    rendered = client.get(f"/api/templates/{template['id']}/render/{record['id']}")
    assert rendered.status_code == 200
    assert "<p>A&amp;B is New; hot: Yes; owner: </p>" in rendered.text
    assert "p { color: #333; }" in rendered.text
    assert rendered.headers["x-unresolved-placeholders"] == "owner"

    preview = client.post(
        f"/api/templates/{template['id']}/preview", json={"data": {"companyName": "Ada"}}
    ).json()
    assert preview["content"] == "<p>Ada is ; hot: ; owner: </p>"
    assert preview["unresolved"] == ["status", "hot", "owner"]


def test_template_with_unknown_form_rejected(client):
    module = client.post("/api/modules", json={"name": "Sales"}).json()
    response = client.post(
        f"/api/modules/{module['id']}/templates", json={"name": "x", "form_id": 999}
    )
    assert response.status_code == 400


def test_not_found_templates(client):
    assert client.get("/api/templates/999").status_code == 404
    assert client.get("/api/templates/999/render/1").status_code == 404
    assert client.get("/api/modules/999/templates").status_code == 404


def test_field_key_with_spaces_rejected(client):
    _, form = _create_form(client)
    response = client.put(
        f"/api/forms/{form['id']}",
        json={"fields": [{"key": "first name", "label": "First", "type": "text"}]},
    )
    assert response.status_code == 400
    assert client.get(f"/api/forms/{form['id']}").json()["fields"] == form["fields"]


def test_oversized_integer_rejected_on_every_backend(client):
    _, form = _create_form(client)
    response = client.post(
        f"/api/forms/{form['id']}/records",
        json={
            "data": {
                "companyName": "Acme",
                "status": "New",
                "potentialValue": "123456789012345678901234567890",
            }
        },
    )
    assert response.status_code == 400
    body = response.json()
    assert body["field"] == "potentialValue"
    assert body["code"] == "invalid_field_type"
    assert client.get(f"/api/forms/{form['id']}/records").json() == []
