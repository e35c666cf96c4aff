"""Tests for the confirmation manager."""

import io
from unittest.mock import Mock, patch

import pytest

from kubectl_safe.safety.confirmation_manager import (
    AFFIRMATIVE_RESPONSES,
    ConfirmationManager,
    read_stdin_line,
)
from kubectl_safe.safety.models import (
    NOT_SPECIFIED,
    ConfirmationInputError,
    ConfirmationRequest,
    ConfirmationTier,
    UserCancelledError,
)

DELETE_ARGS = ["delete", "pod", "mypod", "--context=prod", "--namespace=default"]


class TestBuildRequest:
    """Test confirmation request construction."""

    def test_extracts_targets(self):
        """Test context and namespace are taken from the vector."""
        request = ConfirmationManager().build_request(DELETE_ARGS)

        assert request.context == "prod"
        assert request.namespace == "default"
        assert request.tier == ConfirmationTier.STANDARD
        assert request.command_line == "kubectl delete pod mypod --context=prod --namespace=default"

    def test_custom_binary_in_command_line(self):
        """Test the configured binary is shown."""
        request = ConfirmationManager().build_request(["apply", "-f", "x.yaml"], kubectl_binary="/opt/kubectl")

        assert request.command_line == "/opt/kubectl apply -f x.yaml"
        assert request.context == NOT_SPECIFIED
        assert request.namespace == NOT_SPECIFIED

    def test_production_tier_when_strict(self):
        """Test contexts containing the marker get the production tier."""
        manager = ConfirmationManager(strict_production=True)

        assert manager.build_request(["delete", "--context=eu-PROD-1", "-n", "x"]).tier == ConfirmationTier.PRODUCTION
        assert manager.build_request(["delete", "--context=staging", "-n", "x"]).tier == ConfirmationTier.STANDARD

    def test_standard_tier_when_not_strict(self):
        """Test production contexts use yes/no unless strict mode is on."""
        request = ConfirmationManager(strict_production=False).build_request(DELETE_ARGS)
        assert request.tier == ConfirmationTier.STANDARD

    def test_custom_production_marker(self):
        """Test the marker substring is configurable."""
        manager = ConfirmationManager(strict_production=True, production_marker="LIVE")

        assert manager.build_request(["delete", "--context=live-eu", "-n", "x"]).tier == ConfirmationTier.PRODUCTION
        assert manager.build_request(["delete", "--context=prod", "-n", "x"]).tier == ConfirmationTier.STANDARD


class TestStandardConfirmation:
    """Test the yes/no prompt."""

    def test_affirmative_tokens(self):
        """Test the accepted answers."""
        assert AFFIRMATIVE_RESPONSES == {"yes", "y"}

    @pytest.mark.parametrize("answer", ["yes\n", "y\n", "YES\n", "Y", "  yes  \n", "\tYeS\r\n"])
    def test_accepts_affirmative(self, line_reader, answer, capsys):
        """Test normalised yes/y proceeds."""
        manager = ConfirmationManager(line_reader=line_reader([answer]))

        manager.confirm(manager.build_request(DELETE_ARGS))

        out = capsys.readouterr().out
        assert "Proceeding with operation..." in out
        assert "Operation cancelled." not in out

    @pytest.mark.parametrize("answer", ["no\n", "n\n", "\n", "", "yess\n", "ye\n", "y e s\n", "sure\n"])
    def test_rejects_everything_else(self, line_reader, answer, capsys):
        """Test any other answer cancels."""
        manager = ConfirmationManager(line_reader=line_reader([answer]))

        with pytest.raises(UserCancelledError) as exc_info:
            manager.confirm(manager.build_request(DELETE_ARGS))

        out = capsys.readouterr().out
        assert "Operation cancelled." in out
        assert "Proceeding with operation..." not in out
        assert exc_info.value.message == "operation cancelled by user"

    def test_renders_summary(self, line_reader, capsys):
        """Test the banner, command line and target details are shown."""
        manager = ConfirmationManager(line_reader=line_reader(["y\n"]))
        manager.confirm(manager.build_request(DELETE_ARGS))

        out = capsys.readouterr().out
        assert "DANGEROUS COMMAND DETECTED" in out
        assert "You are about to execute: kubectl delete pod mypod --context=prod --namespace=default" in out
        assert "Target Details:" in out
        assert "  Context:   prod" in out
        assert "  Namespace: default" in out
        assert "This operation may cause data loss or service disruption." in out
        assert "Are you sure you want to continue? (yes/no): " in out

    def test_reads_exactly_one_line(self, line_reader):
        """Test a single blocking read happens."""
        reader = line_reader(["no\n", "yes\n"])
        manager = ConfirmationManager(line_reader=reader)

        with pytest.raises(UserCancelledError):
            manager.confirm(manager.build_request(DELETE_ARGS))
        assert reader.calls == 1


class TestConfirmationInputFailure:
    """Test failures reading the answer."""

    def test_end_of_stream(self, line_reader, capsys):
        """Test a closed stdin is an input error, not a confirmation."""
        manager = ConfirmationManager(line_reader=line_reader([None]))

        with pytest.raises(ConfirmationInputError) as exc_info:
            manager.confirm(manager.build_request(DELETE_ARGS))

        assert "failed to read user input" in exc_info.value.message
        assert "Proceeding with operation..." not in capsys.readouterr().out

    def test_read_error(self, capsys):
        """Test an OSError from the reader is wrapped."""
        cause = OSError("bad file descriptor")
        manager = ConfirmationManager(line_reader=Mock(side_effect=cause))

        with pytest.raises(ConfirmationInputError) as exc_info:
            manager.confirm(manager.build_request(DELETE_ARGS))

        assert exc_info.value.cause is cause
        assert "bad file descriptor" in exc_info.value.message
        assert "Proceeding with operation..." not in capsys.readouterr().out

    def test_undecodable_input(self, capsys):
        """Test bytes that are not valid text become an input error."""
        stdin = io.TextIOWrapper(io.BytesIO(b"\xff\xfe\n"), encoding="utf-8")
        manager = ConfirmationManager()

        with patch("sys.stdin", stdin):
            with pytest.raises(ConfirmationInputError) as exc_info:
                manager.confirm(manager.build_request(DELETE_ARGS))

        assert isinstance(exc_info.value.cause, UnicodeDecodeError)
        assert "failed to read user input" in exc_info.value.message
        assert "Proceeding with operation..." not in capsys.readouterr().out


class TestProductionConfirmation:
    """Test the strict production prompt."""

    def _request(self, context: str) -> ConfirmationRequest:
        return ConfirmationRequest(
            args=["delete", "pod", f"--context={context}", "-n", "default"],
            context=context,
            namespace="default",
            tier=ConfirmationTier.PRODUCTION,
        )

    def test_exact_name_confirms(self, line_reader, capsys):
        """Test typing the context name proceeds."""
        manager = ConfirmationManager(line_reader=line_reader(["prod-eu\n"]), strict_production=True)

        manager.confirm(self._request("prod-eu"))

        out = capsys.readouterr().out
        assert "Type the context name 'prod-eu' to confirm: " in out
        assert "Are you sure you want to continue?" not in out
        assert "Proceeding with operation..." in out

    @pytest.mark.parametrize("answer", ["yes\n", "y\n", "PROD-EU\n", "prod\n", "\n"])
    def test_anything_else_cancels(self, line_reader, answer):
        """Test yes/no and case variants are not enough."""
        reader = line_reader([answer, "prod-eu\n"])
        manager = ConfirmationManager(line_reader=reader, strict_production=True)

        with pytest.raises(UserCancelledError):
            manager.confirm(self._request("prod-eu"))
        assert reader.calls == 1


class TestReadStdinLine:
    """Test the default standard input reader."""

    def test_reads_line(self):
        """Test one line is returned with its newline."""
        with patch("sys.stdin", io.StringIO("yes\nno\n")):
            assert read_stdin_line() == "yes\n"

    def test_end_of_stream(self):
        """Test EOF is reported as None."""
        with patch("sys.stdin", io.StringIO("")):
            assert read_stdin_line() is None
