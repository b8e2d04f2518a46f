import logging
from datetime import datetime

from signature_etl.session import SignatureSession
from tests.conftest import write_xlsx


def _session(**kw):
    kw.setdefault("organization", "Acme Health")
    return SignatureSession(**kw)


def test_end_to_end_email_from_reference_file(tmp_path):
    roster = write_xlsx(
        tmp_path / "hero.xlsx",
        [
            ["First Name", "Last Name", "Job Title", "Work Email"],
            ["Jane", "Smith", "RN", None],
        ],
    )
    ref = write_xlsx(
        tmp_path / "therapists.xlsx",
        [
            ["Name", "Discipline", "Contact"],
            ["Smith, Jane", "PT", "jane.smith@co.com"],
        ],
    )
    out = tmp_path / "out"

    s = _session()
    s.load_roster(roster)
    s.load_reference(ref)
    summary = s.generate(out)

    assert summary.generated == 1
    assert summary.skipped == []
    res = summary.results["SMITH-JANE.txt"]
    assert res.email == "jane.smith@co.com"
    assert res.email_source == "REF:therapists.xlsx"

    lines = (out / "SMITH-JANE.txt").read_text(encoding="utf-8").split("\n")
    assert len(lines) == 5
    assert lines[0] == "Jane Smith"
    assert lines[-1] == "Email | jane.smith@co.com"


def test_employee_without_email_is_skipped(tmp_path, caplog):
    s = _session()
    s.add_roster_rows(["First Name", "Last Name"], [["Jane", "Smith"], ["Bob", "Stone"]], "hero.xlsx")
    s.add_contacts_text('"Bob Stone" <bob@co.com>;', "list.txt")

    with caplog.at_level(logging.WARNING, logger="signature_etl"):
        summary = s.generate(tmp_path / "out")

    assert summary.generated == 1
    assert [k.full_name for k in summary.skipped] == ["Jane Smith"]
    assert "jane|smith" in summary.skipped[0].attempted_keys
    assert not (tmp_path / "out" / "SMITH-JANE.txt").exists()
    assert (tmp_path / "out" / "STONE-BOB.txt").exists()
    assert "SKIPPED: Jane Smith" in caplog.text


def test_roster_sources_are_indexed_first(tmp_path):
    s = _session()
    s.add_roster_rows(
        ["First Name", "Last Name", "Work Email", "Cell Phone"],
        [["Jane", "Smith", "jane@co.com", "555-123-4567"]],
        "hero.xlsx",
    )
    s.add_reference_rows(["Name", "Email"], [["Jane Smith", "other@co.com"]], "ref.xlsx")
    assert s.email_index.get("Jane", "Smith").source == "HERO:hero.xlsx"
    assert s.phone_index.get("Jane", "Smith").value == "555-123-4567"


def test_missing_phone_still_generates(tmp_path):
    s = _session()
    s.add_roster_rows(["First Name", "Last Name", "Work Email"], [["Jane", "Smith", "jane@co.com"]], "hero.xlsx")
    summary = s.generate(tmp_path)
    assert summary.generated == 1
    text = (tmp_path / "SMITH-JANE.txt").read_text(encoding="utf-8")
    assert "Phone | \n" in text
    assert summary.results["SMITH-JANE.txt"].phone_source == "none"


def test_reference_phone_is_used_and_formatted(tmp_path):
    s = _session()
    s.add_roster_rows(["First Name", "Last Name", "Work Email"], [["Jane", "Smith", "jane@co.com"]], "hero.xlsx")
    rep = s.add_reference_rows(["Staff", "Mobile"], [["Jane Smith", "(555) 987-6543"]], "ref.csv")
    assert rep.phones == 1
    summary = s.generate(tmp_path)
    assert summary.results["SMITH-JANE.txt"].phone == "555.987.6543"


def test_reference_without_name_columns_warns(tmp_path):
    s = _session()
    rep = s.add_reference_rows(["A", "B"], [["x@co.com", "555-123-4567"]], "odd.xlsx")
    assert "name columns" in rep.warnings
    assert rep.emails == 0
    assert len(s.email_index) == 0


def test_unreadable_files_do_not_stop_the_run(tmp_path):
    bad = tmp_path / "corrupt.xlsx"
    bad.write_bytes(b"not a workbook")
    good = tmp_path / "ref.csv"
    good.write_text("Name,Email\nJane Smith,jane@co.com\n", encoding="utf-8")

    s = _session()
    s.add_roster_rows(["First Name", "Last Name"], [["Jane", "Smith"]], "hero.xlsx")
    bad_rep = s.load_reference(bad)
    s.load_reference(good)
    missing = s.load_contacts(tmp_path / "missing.txt")

    assert bad_rep.errors
    assert missing.errors
    summary = s.generate(tmp_path / "out")
    assert summary.generated == 1


def test_write_failure_is_counted_as_skip(tmp_path):
    s = _session()
    s.add_roster_rows(
        ["First Name", "Last Name", "Work Email"],
        [["Jane", "Smith", "jane@co.com"], ["Bob", "Stone", "bob@co.com"]],
        "hero.xlsx",
    )
    out = tmp_path / "out"
    # a directory where the file should go makes the write fail
    (out / "SMITH-JANE.txt").mkdir(parents=True)

    summary = s.generate(out)
    assert summary.generated == 1
    assert summary.skipped[0].reason == "write_failed"
    assert (out / "STONE-BOB.txt").exists()


def test_load_roster_from_file(tmp_path):
    path = write_xlsx(
        tmp_path / "hero.xlsx",
        [
            ["Last Name", "First Name", "Cell Phone", "Work Email"],
            ["SMITH", "JANE", 5551234567, "jane@co.com"],
        ],
    )
    s = _session()
    rep = s.load_roster(path)
    assert rep.names == 1
    assert s.roster[0].first_name == "Jane"
    assert s.roster[0].cell_phone == "5551234567"


def test_reference_date_cells_are_not_indexed_as_phones(tmp_path):
    roster = write_xlsx(
        tmp_path / "hero.xlsx",
        [
            ["First Name", "Last Name", "Work Email"],
            ["Jane", "Smith", "jane@co.com"],
            ["Bob", "Stone", "bob@co.com"],
        ],
    )
    ref = write_xlsx(
        tmp_path / "staff.xlsx",
        [
            ["Name", "Start Date", "Mobile"],
            ["Jane Smith", datetime(2024, 1, 15), None],
            ["Bob Stone", datetime(2023, 6, 1), "555-987-6543"],
        ],
    )

    s = _session()
    s.load_roster(roster)
    rep = s.load_reference(ref)
    summary = s.generate(tmp_path / "out")

    assert rep.phones == 1
    jane = summary.results["SMITH-JANE.txt"]
    assert jane.phone == ""
    assert jane.phone_source == "none"
    assert summary.results["STONE-BOB.txt"].phone == "555.987.6543"


def test_report_counts_detected_and_newly_indexed_values(tmp_path):
    s = _session()
    s.add_roster_rows(["First Name", "Last Name"], [["Jane", "Smith"]], "hero.xlsx")
    first = s.add_contacts_text('"Jane Smith" <jane@co.com>;', "a.txt")
    second = s.add_contacts_text('"Jane Smith" <jane.smith@co.com>;', "b.txt")

    assert (first.emails, first.emails_indexed) == (1, 1)
    assert (second.emails, second.emails_indexed) == (1, 0)
    assert s.email_index.get("Jane", "Smith").value == "jane@co.com"


def test_duplicate_filename_keeps_first_and_warns(tmp_path, caplog):
    s = _session()
    s.add_roster_rows(
        ["First Name", "Last Name", "Work Email"],
        [["Jane", "Smith", "jane@co.com"], ["Jane", "Smith", "jsmith@other.com"]],
        "hero.xlsx",
    )

    with caplog.at_level(logging.WARNING, logger="signature_etl"):
        summary = s.generate(tmp_path / "out")

    assert summary.generated == 1
    assert [k.reason for k in summary.skipped] == ["duplicate_name"]
    assert summary.skipped[0].detail == "SMITH-JANE.txt"
    text = (tmp_path / "out" / "SMITH-JANE.txt").read_text(encoding="utf-8")
    assert text.endswith("Email | jane@co.com")
    assert "SMITH-JANE.txt already written in this run" in caplog.text
