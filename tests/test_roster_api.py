from tests.conftest import csv_upload


def upload(client, headers, year, section, body, **kwargs):
    return client.post(
        f"/api/students/{year}/{section}/upload",
        data=csv_upload(body, **kwargs),
        headers=headers,
        content_type="multipart/form-data",
    )


def test_upload_creates_one_student_per_row(client, auth_headers, db):
    body = "S. No,Name,RollNo,RegNo\n1,Asha,R1,G1\n2,Ben,R2,G2\n"

    resp = upload(client, auth_headers, "second-year", "c", body)

    assert resp.status_code == 200
    assert resp.get_json()["count"] == 2
    assert db.students.count_documents({"year": "second-year", "section": "C"}) == 2
    # section appears on first import
    assert db.sections.count_documents({"year": "second-year", "name": "C"}) == 1


def test_reimport_replaces_section(client, auth_headers):
    upload(client, auth_headers, "second-year", "C", "Name,RollNo\nAsha,R1\nBen,R2\nChitra,R3\n")

    resp = upload(client, auth_headers, "second-year", "C", "Name,RollNo\nDev,R4\n")
    assert resp.get_json()["count"] == 1

    roster = client.get("/api/students/second-year/C", headers=auth_headers).get_json()
    assert [s["name"] for s in roster] == ["Dev"]
    assert roster[0]["s_no"] == 1


def test_reimport_leaves_other_sections_alone(client, auth_headers):
    upload(client, auth_headers, "second-year", "C", "Name,RollNo\nAsha,R1\n")
    upload(client, auth_headers, "second-year", "D", "Name,RollNo\nBen,R2\n")

    upload(client, auth_headers, "second-year", "C", "Name,RollNo\nDev,R4\n")

    roster = client.get("/api/students/second-year/D", headers=auth_headers).get_json()
    assert [s["name"] for s in roster] == ["Ben"]


def test_roster_is_sorted_by_serial_number(client, auth_headers):
    upload(client, auth_headers, "first-year", "E", "S. No,Student Name,Roll Number\n2,Ben,F2\n1,Asha,F1\n")

    roster = client.get("/api/students/first-year/e", headers=auth_headers).get_json()

    assert [s["roll_no"] for s in roster] == ["F1", "F2"]


def test_upload_rejects_other_content_types(client, auth_headers):
    resp = upload(client, auth_headers, "second-year", "C", "{}", filename="x.json", content_type="application/json")

    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "ValidationFailure"


def test_upload_rejects_files_over_five_mib(client, auth_headers):
    body = "Name\n" + "x" * (5 * 1024 * 1024)

    resp = upload(client, auth_headers, "second-year", "C", body)

    assert resp.status_code == 400


def test_upload_without_file(client, auth_headers):
    resp = client.post(
        "/api/students/second-year/C/upload",
        data={},
        headers=auth_headers,
        content_type="multipart/form-data",
    )

    assert resp.status_code == 400


def test_upload_unknown_year(client, auth_headers):
    resp = upload(client, auth_headers, "fifth-year", "C", "Name\nAsha\n")

    assert resp.status_code == 400


def test_delete_all_students(client, auth_headers, db):
    upload(client, auth_headers, "third-year", "A", "Name,RollNo\nAsha,R1\nBen,R2\n")

    resp = client.delete("/api/students/third-year/A/all", headers=auth_headers)

    assert resp.get_json()["deleted_count"] == 2
    assert db.students.count_documents({"year": "third-year"}) == 0


def test_create_and_list_sections(client, auth_headers):
    created = client.post("/api/sections/final-year", json={"section": " b "}, headers=auth_headers)
    client.post("/api/sections/final-year", json={"section": "A"}, headers=auth_headers)

    assert created.status_code == 201
    assert created.get_json()["section"] == "B"
    listed = client.get("/api/sections/final-year", headers=auth_headers).get_json()
    assert listed == {"sections": ["A", "B"]}


def test_duplicate_section_conflicts(client, auth_headers):
    client.post("/api/sections/final-year", json={"section": "A"}, headers=auth_headers)

    resp = client.post("/api/sections/final-year", json={"section": "a"}, headers=auth_headers)

    assert resp.status_code == 409
    assert resp.get_json()["kind"] == "DuplicateKey"


def test_section_name_required(client, auth_headers):
    resp = client.post("/api/sections/final-year", json={"section": "  "}, headers=auth_headers)

    assert resp.status_code == 400


def test_section_name_must_be_text(client, auth_headers):
    resp = client.post("/api/sections/first-year", json={"section": 5}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "ValidationFailure"


def test_section_body_must_be_an_object(client, auth_headers):
    resp = client.post("/api/sections/first-year", json=["A"], headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "ValidationFailure"


def test_delete_section_cascades_to_students(client, auth_headers, db):
    upload(client, auth_headers, "second-year", "C", "Name,RollNo\nAsha,R1\nBen,R2\n")

    resp = client.delete("/api/sections/second-year/c", headers=auth_headers)

    assert resp.get_json() == {"success": True, "deleted_students": 2}
    assert db.sections.count_documents({"year": "second-year"}) == 0
    assert db.students.count_documents({"year": "second-year"}) == 0
