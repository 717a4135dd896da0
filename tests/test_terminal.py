"""Tests for raw-mode lifecycle and window-size detection.

Verifies the tty is restored on every exit path and that the cursor-position
probe is used when the size ioctl reports nothing.
"""

from __future__ import annotations

import os
import termios
import unittest
from unittest import mock

from conchpad.terminal import TerminalController, TerminalSizeError


def make_controller() -> TerminalController:
    with mock.patch("conchpad.terminal.termios.tcgetattr", return_value=[0]):
        return TerminalController(stdin_fd=0, stdout_fd=1)


class RawModeTests(unittest.TestCase):
    def test_enable_and_restore_use_alternate_screen_and_saved_state(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("conchpad.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "conchpad.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("conchpad.terminal.os.write") as write_mock, mock.patch(
            "conchpad.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_raw_mode()
            controller.restore()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(write_mock.call_args_list[0].args, (1, b"\x1b[?1049h\x1b[2J\x1b[H"))
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[2J\x1b[H\x1b[?25h\x1b[?1049l"))
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        controller = make_controller()

        with mock.patch.object(controller, "enable_raw_mode") as enable_mock, mock.patch.object(
            controller, "restore"
        ) as restore_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        restore_mock.assert_called_once()


class WindowSizeTests(unittest.TestCase):
    def test_uses_reported_terminal_size(self) -> None:
        controller = make_controller()

        with mock.patch("conchpad.terminal.os.get_terminal_size", return_value=os.terminal_size((100, 30))):
            self.assertEqual(controller.window_size(), (30, 100))

    def test_falls_back_to_cursor_probe(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            with mock.patch("conchpad.terminal.termios.tcgetattr", return_value=[0]):
                controller = TerminalController(stdin_fd=read_fd, stdout_fd=1)
            os.write(write_fd, b"\x1b[41;132R")

            with mock.patch(
                "conchpad.terminal.os.get_terminal_size", return_value=os.terminal_size((0, 0))
            ), mock.patch("conchpad.terminal.os.write") as write_mock:
                size = controller.window_size()
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(size, (41, 132))
        write_mock.assert_called_once_with(1, b"\x1b[999C\x1b[999B\x1b[6n")

    def test_probe_without_reply_raises(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            with mock.patch("conchpad.terminal.termios.tcgetattr", return_value=[0]):
                controller = TerminalController(stdin_fd=read_fd, stdout_fd=1)
            os.write(write_fd, b"garbage")
            os.close(write_fd)
            write_fd = None

            with mock.patch(
                "conchpad.terminal.os.get_terminal_size", side_effect=OSError("not a tty")
            ), mock.patch("conchpad.terminal.os.write"):
                with self.assertRaises(TerminalSizeError):
                    controller.window_size()
        finally:
            os.close(read_fd)
            if write_fd is not None:
                os.close(write_fd)


if __name__ == "__main__":
    unittest.main()
