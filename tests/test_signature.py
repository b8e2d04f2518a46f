from signature_etl.parsers import Employee
from signature_etl.signature import render_signature, signature_filename


def test_render_signature_five_lines():
    emp = Employee("Jane", "Smith", job_title="Physical Therapist")
    text = render_signature(emp, "jane@co.com", "555.123.4567", organization="Acme Health")
    assert text.split("\n") == [
        "Jane Smith",
        "Physical Therapist",
        "Acme Health",
        "Phone | 555.123.4567",
        "Email | jane@co.com",
    ]


def test_render_signature_empty_title_and_phone():
    lines = render_signature(Employee("Jane", "Smith"), "jane@co.com", "").split("\n")
    assert len(lines) == 5
    assert lines[1] == ""
    assert lines[3] == "Phone | "


def test_signature_filename():
    assert signature_filename("Jane", "Smith") == "SMITH-JANE.txt"
    assert signature_filename("Mary Anne", "Smith-Jones") == "SMITH-JONES-MARY-ANNE.txt"
    assert signature_filename("Zoë", "O'Brien") == "O'BRIEN-ZOE.txt"
