"""
Runs the example walkthrough against a moto DynamoDB.
"""

import sys
from pathlib import Path

# Add examples directory to path so we can import the walkthrough
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "examples"))

import user_example  # noqa: E402


class TestUserExample:
    """Test the CRUD walkthrough end to end."""

    def test_walkthrough_with_table_creation(self, mock_dynamodb, capsys):
        exit_code = user_example.main(["--create-table"])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "User saved successfully!" in output
        assert "Retrieved user: User(user_id='user001'" in output
        assert "Found 1 user(s):" in output
        assert "age=31" in output
        assert "Deleted user:" in output

    def test_missing_table_reports_error(self, mock_dynamodb, capsys):
        exit_code = user_example.main(["--table-name", "NoSuchTable"])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.err.startswith("Error: ")
