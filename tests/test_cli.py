"""
Tests for the command-line interface.
"""

import json
from unittest.mock import patch

from click.testing import CliRunner

from streamsweep.cli.main import main


class TestDeleteStreams:
    """Test the delete-streams command."""

    def run(self, tmp_path, transport, *args):
        checkpoint = tmp_path / "streams-status.json"
        runner = CliRunner()
        with patch('streamsweep.orchestrator.LightstepTransport', return_value=transport) as factory:
            result = runner.invoke(main, [
                *args[:1],
                'delete-streams', 'acme', 'prod',
                '--api-key', 'secret',
                '--checkpoint', str(checkpoint),
                *args[1:],
            ])
        return result, factory, checkpoint

    def test_dry_run_is_default(self, tmp_path, make_transport):
        transport = make_transport(streams=["a", "b"], active={"b"})

        result, factory, checkpoint = self.run(tmp_path, transport, '--verbose')

        assert result.exit_code == 0, result.output
        assert transport.deleted == []
        assert "Dry run" in result.output
        assert "Unknown" in result.output and "Inactive" in result.output and "Deleted" in result.output
        assert json.loads(checkpoint.read_text()) == {"a": "inactive"}
        factory.assert_called_once_with('acme', 'prod', 'secret', env=None, timeout=30)

    def test_json_report(self, tmp_path, make_transport):
        transport = make_transport(streams=["a", "b"])

        result, _, _ = self.run(tmp_path, transport, '--json', '--no-dry-run', '--env', 'staging')

        assert result.exit_code == 0, result.output
        report = json.loads(result.output.strip().splitlines()[-1])
        assert sorted(report["deleted"]) == ["a", "b"]
        assert report["unknown"] == []
        assert report["inactive"] == []
        assert report["dry_run"] is False
        assert report["state"] == "reported"

    def test_resume_without_checkpoint_exits_nonzero(self, tmp_path, make_transport):
        result, _, _ = self.run(tmp_path, make_transport(), '--verbose', '--resume')

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_missing_api_key(self, tmp_path):
        result = CliRunner().invoke(main, ['delete-streams', 'acme', 'prod'], env={'LIGHTSTEP_API_KEY': None})

        assert result.exit_code != 0
        assert "api-key" in result.output

    def test_invalid_days(self, tmp_path, make_transport):
        result, factory, _ = self.run(tmp_path, make_transport(), '--json', '--days', '0')

        assert result.exit_code == 1
        assert "days must be at least 1" in result.output
        factory.assert_not_called()


class TestStatus:
    """Test the status command."""

    def test_summarizes_checkpoint(self, tmp_path):
        checkpoint = tmp_path / "streams-status.json"
        checkpoint.write_text(json.dumps({"a": "unknown", "b": "deleted"}))

        result = CliRunner().invoke(main, ['--json', 'status', '--checkpoint', str(checkpoint)])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"unknown": ["a"], "inactive": [], "deleted": ["b"]}

    def test_missing_checkpoint(self, tmp_path):
        result = CliRunner().invoke(main, ['status', '--checkpoint', str(tmp_path / "nope.json")])

        assert result.exit_code == 1

    def test_checkpoint_not_utf8(self, tmp_path):
        checkpoint = tmp_path / "streams-status.json"
        checkpoint.write_bytes(b'{"a": "unknown", "\xff\xfe": "deleted"}')

        result = CliRunner().invoke(main, ['status', '--checkpoint', str(checkpoint)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "not valid UTF-8" in result.output
