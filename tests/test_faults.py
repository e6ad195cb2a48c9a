"""Tests for process-level fault handlers."""

import sys
import threading
from unittest.mock import MagicMock, patch

from resume_craft.server import faults


def test_loop_exception_is_fatal():
    with patch.object(faults, "_terminate") as terminate:
        faults.loop_exception_handler(
            MagicMock(), {"message": "Task exception", "exception": RuntimeError("x")}
        )
    terminate.assert_called_once_with()


def test_loop_message_without_exception_is_only_logged(caplog):
    with patch.object(faults, "_terminate") as terminate:
        faults.loop_exception_handler(MagicMock(), {"message": "slow callback"})
    terminate.assert_not_called()
    assert "slow callback" in caplog.text


def test_thread_system_exit_is_ignored():
    args = MagicMock(exc_type=SystemExit)
    with patch.object(faults, "_terminate") as terminate:
        faults._thread_excepthook(args)
    terminate.assert_not_called()


def test_install_fault_handlers(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    faults.install_fault_handlers()
    assert sys.excepthook is faults._excepthook
    assert threading.excepthook is faults._thread_excepthook
