# tests/test_cli.py
"""Tests for the coarnotify command line."""

import json
import tempfile
from pathlib import Path

import pytest
import yaml

from coarnotify.cli import INBOX_URL_ENV, load_document, main
from coarnotify.inbox import InboxServer

from notify_fixtures import ALL_PATTERNS, invalid, source


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def inbox(temp_dir):
    server = InboxServer(temp_dir / "inbox", port=0)
    server.start_background()
    yield server
    server.shutdown()


def write_json(directory: Path, name: str, doc) -> str:
    path = directory / name
    path.write_text(json.dumps(doc))
    return str(path)


class TestLoadDocument:
    """Test reading notification files."""

    def test_json(self, temp_dir):
        path = write_json(temp_dir, "rr.json", source("RequestReview"))
        assert load_document(path) == source("RequestReview")

    def test_yaml(self, temp_dir):
        """Test YAML documents, chosen by extension."""
        path = temp_dir / "rr.yaml"
        path.write_text(yaml.safe_dump(source("RequestReview")))
        assert load_document(path) == source("RequestReview")

    def test_not_an_object(self, temp_dir):
        """Test a file holding something other than an object."""
        path = write_json(temp_dir, "list.json", [1, 2, 3])
        with pytest.raises(ValueError):
            load_document(path)


class TestValidateCommand:
    """Test `coarnotify validate`."""

    def test_valid(self, temp_dir, capsys):
        """Test a valid document."""
        path = write_json(temp_dir, "rr.json", source("RequestReview"))

        assert main(["validate", path]) == 0
        out = capsys.readouterr().out
        assert out.startswith("OK RequestReview urn:uuid:0370c0fb-bb78-4a9b-87f5-bed307a509dd")

    def test_invalid(self, temp_dir, capsys):
        """Test an invalid document prints its errors."""
        path = write_json(temp_dir, "bad.json", invalid("RequestReview"))

        assert main(["validate", path]) == 1
        out = capsys.readouterr().out
        first, rest = out.split("\n", 1)
        assert first == "INVALID RequestReview not a uri"
        errors = json.loads(rest)
        assert "inbox" in errors["origin"]["nested"]

    def test_yaml(self, temp_dir, capsys):
        """Test validating a YAML document."""
        path = temp_dir / "accept.yml"
        path.write_text(yaml.safe_dump(source("Accept")))

        assert main(["validate", str(path)]) == 0
        assert "OK Accept" in capsys.readouterr().out

    def test_unknown_type(self, temp_dir, capsys):
        """Test a document no pattern matches."""
        doc = source("RequestReview")
        doc["type"] = "UnknownType"
        path = write_json(temp_dir, "unknown.json", doc)

        assert main(["validate", path]) == 1
        assert "No matching pattern" in capsys.readouterr().err

    def test_missing_file(self, temp_dir, capsys):
        """Test a path that does not exist."""
        assert main(["validate", str(temp_dir / "nowhere.json")]) == 1
        assert capsys.readouterr().err.startswith("Error: ")

    def test_malformed_yaml(self, temp_dir, capsys):
        """Test a YAML file that does not parse."""
        path = temp_dir / "broken.yaml"
        path.write_text("type: [Offer\nid: : :\n")

        assert main(["validate", str(path)]) == 1
        assert capsys.readouterr().err.startswith("Error: ")

    def test_malformed_json(self, temp_dir, capsys):
        path = temp_dir / "broken.json"
        path.write_text("{not json")

        assert main(["validate", str(path)]) == 1
        assert capsys.readouterr().err.startswith("Error: ")


class TestSendCommand:
    """Test `coarnotify send` against a local inbox."""

    def test_send(self, temp_dir, inbox, capsys):
        """Test sending to an inbox given on the command line."""
        path = write_json(temp_dir, "rr.json", source("RequestReview"))

        assert main(["send", path, "--inbox", inbox.inbox_url]) == 0
        out = capsys.readouterr().out
        assert "Sent RequestReview" in out
        assert "created" in out
        assert f"Location: {inbox.base_url}/notifications/" in out
        assert len(inbox.store) == 1

    def test_send_env_inbox(self, temp_dir, inbox, capsys, monkeypatch):
        """Test the inbox taken from the environment."""
        monkeypatch.setenv(INBOX_URL_ENV, inbox.inbox_url)
        path = write_json(temp_dir, "accept.json", source("Accept"))

        assert main(["send", path]) == 0
        assert len(inbox.store) == 1

    def test_send_invalid(self, temp_dir, inbox, capsys):
        """Test that an invalid document is not sent."""
        path = write_json(temp_dir, "bad.json", invalid("RequestReview"))

        assert main(["send", path, "--inbox", inbox.inbox_url]) == 1
        assert "invalid notification" in capsys.readouterr().err
        assert len(inbox.store) == 0

    def test_send_refused(self, temp_dir, inbox, capsys):
        """Test an inbox refusing a notification sent without validation."""
        path = write_json(temp_dir, "bad.json", invalid("RequestReview"))

        assert main(["send", path, "--inbox", inbox.inbox_url, "--no-validate"]) == 1
        assert "400" in capsys.readouterr().err

    def test_send_missing_file(self, temp_dir, inbox, capsys):
        """Test that a missing file is reported, not raised."""
        assert main(["send", str(temp_dir / "nowhere.yml"), "--inbox", inbox.inbox_url]) == 1
        assert capsys.readouterr().err.startswith("Error: ")
        assert len(inbox.store) == 0


class TestPatternsCommand:
    """Test `coarnotify patterns`."""

    def test_lists_patterns(self, capsys):
        assert main(["patterns"]) == 0
        out = capsys.readouterr().out
        for name in ALL_PATTERNS:
            assert f"{name}: " in out
        assert "RequestReview: Offer, coar-notify:ReviewAction" in out


class TestNoCommand:
    def test_help(self, capsys):
        """Test that no command prints help and fails."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out
