import pytest

from config_document import ConfigDocument
from validate_config import REQUIRED_ENV, find_problems, validate_config

GOOD = {
    "DISCOURSE_HOSTNAME":         "forum.mysite.org",
    "DISCOURSE_DEVELOPER_EMAILS": "admin@mysite.org",
    "DISCOURSE_SMTP_ADDRESS":     "smtp.mailgun.org",
    "DISCOURSE_SMTP_USER_NAME":   "postmaster@mysite.org",
    "DISCOURSE_SMTP_PASSWORD":    "s3cret",
}


@pytest.fixture
def written(tmp_path, template_text):
    def write(**values):
        doc = ConfigDocument.parse(template_text)
        for key, value in {**GOOD, **values}.items():
            doc.set(key, value)
        return doc.save(tmp_path / "app.yml")
    return write


def test_valid_config_passes(written, capsys):
    validate_config(written())
    out = capsys.readouterr().out
    assert out.count("PASS") == len(REQUIRED_ENV)


def test_untouched_template_fails_every_field(tmp_path, template_text):
    path = tmp_path / "app.yml"
    path.write_text(template_text)
    problems = dict(find_problems(path))
    assert problems["DISCOURSE_HOSTNAME"].startswith("left at default")
    assert problems["DISCOURSE_SMTP_USER_NAME"] == "not present"
    assert problems["DISCOURSE_SMTP_PASSWORD"] == "not present"


@pytest.mark.parametrize("key", REQUIRED_ENV)
def test_placeholder_value_named(written, key, capsys):
    path = written(**{key: "someone@example.com"})
    with pytest.raises(SystemExit) as exc:
        validate_config(path)
    assert exc.value.code == 1
    assert f"FAIL\x1b[0m -- {key}" in capsys.readouterr().out


def test_blank_value_named(written):
    path = written(DISCOURSE_SMTP_PASSWORD="")
    assert find_problems(path) == [("DISCOURSE_SMTP_PASSWORD", "blank")]


def test_invalid_yaml(tmp_path):
    path = tmp_path / "app.yml"
    path.write_text("env: [unclosed\n")
    with pytest.raises(SystemExit):
        validate_config(path)
