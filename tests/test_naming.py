import pytest

from uploads import naming


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("../../etc/passwd", "passwd"),
        ("/abs/path/data.txt.gz", "data.txt.gz"),
        ("C:\\Users\\me\\data.txt.gz", "data.txt.gz"),
        ("dir/", "dir"),
        ("my file  name.txt.gz", "my_file_name.txt.gz"),
        ("tab\tand\nnewline.txt.gz", "tab_and_newline.txt.gz"),
        ("plain.txt.gz", "plain.txt.gz"),
    ],
)
def test_sanitize_filename(raw, expected):
    assert naming.sanitize_filename(raw) == expected


def test_sanitize_output_has_no_separators():
    for raw in ["a/b/c", "..\\..\\x", "/", "x/../y z"]:
        out = naming.sanitize_filename(raw)
        assert "/" not in out and "\\" not in out


def test_sanitize_empty_and_whitespace_only():
    assert naming.sanitize_filename("") == ""
    assert naming.sanitize_filename("   ") == "_"


def test_stored_filename_uses_timestamp_prefix():
    assert naming.stored_filename("my file.txt.gz", 1700000000123) == "1700000000123-my_file.txt.gz"


def test_stored_filename_defaults_to_now(monkeypatch):
    monkeypatch.setattr(naming, "now_millis", lambda: 5)
    assert naming.stored_filename("a.txt.gz") == "5-a.txt.gz"


def test_same_millisecond_same_name_collides():
    # Not prevented: identical names within one millisecond map to one file.
    assert naming.stored_filename("a b.txt.gz", 10) == naming.stored_filename("dir/a  b.txt.gz", 10)
