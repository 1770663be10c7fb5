"""Tests for the terminal and graphical notifiers and backend selection."""

import io
import logging
import os
from datetime import datetime, timedelta
from threading import Event

import pytest

from remindr.notifiers import (
    ConfirmationError,
    ConfirmationStatus,
    Environment,
    GraphicalNotifier,
    NotifyError,
    TerminalNotifier,
    create_notifier,
)
from remindr.notifiers import graphical
from remindr.notifiers.base import NO_REASON_GIVEN


def later(minutes=10):
    return datetime.now() + timedelta(minutes=minutes)


def terminal(config, text):
    output = io.StringIO()
    return TerminalNotifier(config, input_stream=io.StringIO(text), output_stream=output), output


class TestTerminalNotifier:
    """Prompts read from an input stream."""

    def test_yes(self, config):
        notifier, output = terminal(config, "y\n")
        result = notifier.confirm("Did you complete: Write report?", later())

        assert result.status is ConfirmationStatus.YES
        assert "Did you complete: Write report? (y/n): " in output.getvalue()

    def test_no_then_reason(self, config):
        notifier, output = terminal(config, "no\nran out of time\n")
        result = notifier.confirm("Done?", later(), reason_prompt="Why not?")

        assert result.status is ConfirmationStatus.NO
        assert result.reason == "ran out of time"
        assert "Why not?" in output.getvalue()

    def test_blank_reason_prompts_again(self, config):
        notifier, _ = terminal(config, "n\n\n  \nstuck in traffic\n")
        result = notifier.confirm("Done?", later())

        assert result.reason == "stuck in traffic"

    def test_unrecognized_answer_asks_again(self, config):
        notifier, output = terminal(config, "maybe\nYES\n")
        result = notifier.confirm("Done?", later())

        assert result.status is ConfirmationStatus.YES
        assert "Please answer 'y' or 'n'" in output.getvalue()

    def test_closed_input_times_out_after_retries(self, config):
        """EOF is a broken channel; retries are bounded."""
        notifier, _ = terminal(config, "")
        result = notifier.confirm("Done?", later())

        assert result.status is ConfirmationStatus.TIMED_OUT

    def test_input_closed_while_giving_reason(self, config):
        notifier, _ = terminal(config, "n\n")
        result = notifier.confirm("Done?", later())

        assert result.status is ConfirmationStatus.NO
        assert result.reason == NO_REASON_GIVEN

    def test_expired_window_does_not_read(self, config):
        notifier, output = terminal(config, "y\n")
        result = notifier.confirm("Done?", datetime.now() - timedelta(seconds=1))

        assert result.status is ConfirmationStatus.TIMED_OUT
        assert output.getvalue() == ""

    def test_cancelled_before_prompt(self, config):
        notifier, _ = terminal(config, "y\n")
        cancel = Event()
        cancel.set()
        result = notifier.confirm("Done?", later(), cancel_event=cancel)

        assert result.status is ConfirmationStatus.TIMED_OUT
        assert result.cancelled

    def test_cancelled_after_no_is_not_a_missed_answer(self, config):
        """An interrupt between 'no' and the reason gives a cancelled timeout."""
        cancel = Event()

        class InterruptedTerminal(TerminalNotifier):
            def _ask_yes_no(self, prompt, timeout, cancel_event):
                answer = super()._ask_yes_no(prompt, timeout, cancel_event)
                cancel_event.set()
                return answer

        notifier = InterruptedTerminal(
            config, input_stream=io.StringIO("n\nran out of time\n"), output_stream=io.StringIO(),
        )
        result = notifier.confirm("Done?", later(), cancel_event=cancel)

        assert result.status is ConfirmationStatus.TIMED_OUT
        assert result.cancelled
        assert result.reason is None

    def test_alert_rings_bell(self, config):
        notifier, output = terminal(config, "")
        notifier.alert("⏰ Task Starting:\nWorkout")

        assert "Workout" in output.getvalue()
        assert "\x07" in output.getvalue()

    def test_alert_on_closed_stream_raises_notify_error(self, config):
        output = io.StringIO()
        output.close()
        notifier = TerminalNotifier(config, input_stream=io.StringIO(""), output_stream=output)

        with pytest.raises(NotifyError):
            notifier.alert("hello")

    def test_silent_pipe_times_out(self, config):
        """A real file descriptor with no data waits only as long as allowed."""
        read_fd, write_fd = os.pipe()
        try:
            with os.fdopen(read_fd, 'r') as reader:
                notifier = TerminalNotifier(config, input_stream=reader, output_stream=io.StringIO())
                assert notifier._read_line(0.2, Event()) is None
        finally:
            os.close(write_fd)

    def test_pipe_with_answer(self, config):
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"y\n")
        try:
            with os.fdopen(read_fd, 'r') as reader:
                notifier = TerminalNotifier(config, input_stream=reader, output_stream=io.StringIO())
                result = notifier.confirm("Done?", later())
                assert result.status is ConfirmationStatus.YES
        finally:
            os.close(write_fd)


class FakeProcess:
    """Stand-in for a finished zenity process."""

    def __init__(self, returncode, stdout=""):
        self.returncode = returncode
        self.stdout = io.StringIO(stdout)
        self.killed = False

    def poll(self):
        return self.returncode

    def kill(self):
        self.killed = True

    def wait(self):
        return self.returncode


class FakePopen:
    """Replays queued zenity results and records command lines."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append(args)
        if args[0] in ('paplay', 'beep'):
            return FakeProcess(0)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_popen(monkeypatch):
    def install(*results):
        popen = FakePopen(results)
        monkeypatch.setattr(graphical.subprocess, 'Popen', popen)
        return popen
    return install


class TestGraphicalNotifier:
    """zenity dialogs driven through a fake subprocess."""

    def test_question_ok_is_yes(self, config, fake_popen):
        popen = fake_popen(FakeProcess(0))
        result = GraphicalNotifier(config).confirm("Did you complete: Workout?", later())

        assert result.status is ConfirmationStatus.YES
        args = popen.calls[0]
        assert args[:2] == ["zenity", "--question"]
        assert "Did you complete: Workout?" in args
        assert any(arg.startswith("--timeout=") for arg in args)

    def test_question_no_then_entry(self, config, fake_popen):
        popen = fake_popen(FakeProcess(1), FakeProcess(0, "too tired\n"))
        result = GraphicalNotifier(config).confirm("Done?", later(), reason_prompt="Why?")

        assert result.status is ConfirmationStatus.NO
        assert result.reason == "too tired"
        assert popen.calls[1][:2] == ["zenity", "--entry"]

    def test_dialog_timeout_is_timed_out(self, config, fake_popen):
        fake_popen(FakeProcess(graphical.ZENITY_TIMEOUT))
        result = GraphicalNotifier(config).confirm("Done?", later())

        assert result.status is ConfirmationStatus.TIMED_OUT

    def test_unexpected_exit_code_is_retried(self, config, fake_popen):
        popen = fake_popen(FakeProcess(255), FakeProcess(0))
        result = GraphicalNotifier(config).confirm("Done?", later())

        assert result.status is ConfirmationStatus.YES
        assert len(popen.calls) == 2

    def test_missing_zenity_on_confirm(self, config, fake_popen):
        fake_popen(*[FileNotFoundError("zenity")] * 3)
        result = GraphicalNotifier(config).confirm("Done?", later())

        assert result.status is ConfirmationStatus.TIMED_OUT

    def test_alert_failure_raises_notify_error(self, config, fake_popen):
        fake_popen(FileNotFoundError("zenity"))

        with pytest.raises(NotifyError):
            GraphicalNotifier(config).alert("Task Starting")

    def test_alert_plays_sound(self, config, fake_popen, tmp_path):
        sound = tmp_path / "bell.oga"
        sound.write_bytes(b"")
        popen = fake_popen(FakeProcess(0))

        GraphicalNotifier(config, has_paplay=True, sound_paths=[str(sound)]).alert("Task Starting")

        assert popen.calls[0][:2] == ["zenity", "--info"]
        assert popen.calls[1] == ["paplay", str(sound)]

    def test_run_dialog_cancelled(self, config, monkeypatch):
        class RunningProcess(FakeProcess):
            def poll(self):
                return None if not self.killed else -9

        process = RunningProcess(None)
        monkeypatch.setattr(graphical.subprocess, 'Popen', lambda *a, **k: process)
        cancel = Event()
        cancel.set()

        assert GraphicalNotifier(config)._run_dialog(["zenity", "--question"], 60, cancel) is None
        assert process.killed

    def test_zenity_error_code_raises(self, config, fake_popen):
        fake_popen(FakeProcess(255))

        with pytest.raises(ConfirmationError):
            GraphicalNotifier(config)._ask_yes_no("Done?", 30, Event())


class TestBackendSelection:
    """The notifier is chosen once at startup."""

    def test_detect_headless(self, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: f"/usr/bin/{name}")
        environment = Environment.detect(environ={})

        assert environment.is_headless
        assert not environment.graphical_available

    def test_detect_desktop(self, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: f"/usr/bin/{name}" if name == "zenity" else None)
        environment = Environment.detect(environ={"DISPLAY": ":0"})

        assert environment.graphical_available
        assert not environment.has_paplay

    def test_auto_prefers_graphical(self, config):
        environment = Environment(has_zenity=True, has_paplay=True, is_headless=False)
        notifier = create_notifier(config, environment)

        assert isinstance(notifier, GraphicalNotifier)
        assert notifier.has_paplay

    def test_auto_falls_back_to_terminal_with_one_message(self, config, caplog):
        environment = Environment(has_zenity=False, has_paplay=False, is_headless=False)
        with caplog.at_level(logging.INFO, logger="remindr.notifiers.environment"):
            notifier = create_notifier(config, environment)

        assert isinstance(notifier, TerminalNotifier)
        assert len(caplog.records) == 1
        assert "zenity not installed" in caplog.records[0].getMessage()

    def test_terminal_backend_forced(self, config):
        config['notifier']['backend'] = 'terminal'
        environment = Environment(has_zenity=True, has_paplay=True, is_headless=False)

        assert isinstance(create_notifier(config, environment), TerminalNotifier)

    def test_unknown_backend(self, config):
        config['notifier']['backend'] = 'carrier-pigeon'
        environment = Environment(has_zenity=True, has_paplay=True, is_headless=False)

        with pytest.raises(ValueError):
            create_notifier(config, environment)

    def test_windows_terminal_warns_about_untimed_prompts(self, config, caplog, monkeypatch):
        monkeypatch.setattr("remindr.notifiers.environment.sys.platform", "win32")
        config['notifier']['backend'] = 'terminal'
        environment = Environment(has_zenity=False, has_paplay=False, is_headless=True)
        with caplog.at_level(logging.WARNING, logger="remindr.notifiers.environment"):
            notifier = create_notifier(config, environment)

        assert isinstance(notifier, TerminalNotifier)
        assert len(caplog.records) == 1
        assert "without a time limit" in caplog.records[0].getMessage()

    def test_no_windows_warning_elsewhere(self, config, caplog, monkeypatch):
        monkeypatch.setattr("remindr.notifiers.environment.sys.platform", "linux")
        config['notifier']['backend'] = 'terminal'
        environment = Environment(has_zenity=False, has_paplay=False, is_headless=True)
        with caplog.at_level(logging.WARNING, logger="remindr.notifiers.environment"):
            create_notifier(config, environment)

        assert caplog.records == []
