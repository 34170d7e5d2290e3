"""
Unit tests for the menu loop and the program entry point
"""

import os
import shutil
import signal
import tempfile
import unittest
from unittest.mock import patch

import sdr_hub_setup
from sdr_hub_setup import HubConfig, SdrHubSetup, main
from tests.fakes import FakeSubprocess, scripted_answers


class MenuTestCase(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="sdr_hub_test_")
        self.fake = FakeSubprocess()
        patcher = patch.object(sdr_hub_setup.subprocess, "run", self.fake)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def answer(self, *answers):
        patcher = patch.object(
            sdr_hub_setup.Prompt, "ask", side_effect=scripted_answers(*answers)
        )
        mock = patcher.start()
        self.addCleanup(patcher.stop)
        return mock

    def path(self, *parts):
        return os.path.join(self.test_dir, *parts)


class TestDispatch(MenuTestCase):
    def setUp(self):
        super().setUp()
        self.app = SdrHubSetup(
            HubConfig(
                systemd_dir=self.path("systemd"),
                blacklist_file=self.path("blacklist-rtl.conf"),
                build_dir=self.path("build"),
            )
        )

    def test_exit_option(self):
        self.assertFalse(self.app.dispatch("6"))

    def test_invalid_choice_changes_nothing(self):
        ask = self.answer("")
        with patch.object(sdr_hub_setup, "print_error") as print_error:
            self.assertTrue(self.app.dispatch("9"))
        print_error.assert_called_once_with("Invalid choice.")
        self.assertEqual(ask.call_count, 1)
        self.assertEqual(self.fake.calls, [])
        self.assertEqual(os.listdir(self.test_dir), [])
        self.assertTrue(
            all(data["status"] == "pending" for data in self.app.status.values())
        )

    def test_whitespace_around_choice_is_ignored(self):
        self.answer("")
        self.assertTrue(self.app.dispatch(" 5 \n"))
        self.assertIn(
            ["apt", "install", "-y", "prometheus-node-exporter"], self.fake.commands
        )
        self.assertEqual(
            self.app.status["install_node_exporter"]["status"], "success"
        )

    def test_empty_suffix_returns_to_menu(self):
        ask = self.answer("", "")
        with patch.object(sdr_hub_setup, "print_error") as print_error:
            self.assertTrue(self.app.dispatch("4"))
        print_error.assert_called_once_with("Suffix cannot be empty.")
        self.assertEqual(ask.call_count, 2)
        self.assertEqual(self.fake.calls, [])
        self.assertEqual(os.listdir(self.test_dir), [])
        self.assertEqual(
            self.app.status["configure_additional_rtl_tcp"]["status"], "rejected"
        )

    def test_failed_action_is_recorded(self):
        self.fake.failures["apt"] = 100
        with self.assertRaises(sdr_hub_setup.CommandError):
            self.app.dispatch("1")
        self.assertEqual(self.app.status["install_base"]["status"], "failed")

    def test_run_redisplays_menu_after_invalid_choice(self):
        ask = self.answer("9", "", "6")
        with patch.object(
            sdr_hub_setup.SdrHubSetup, "show_menu", wraps=self.app.show_menu
        ) as show_menu:
            self.assertEqual(self.app.run(), 0)
        self.assertEqual(show_menu.call_count, 2)
        self.assertEqual(ask.call_count, 3)

    def test_run_treats_eof_as_exit(self):
        with patch.object(sdr_hub_setup.Prompt, "ask", side_effect=EOFError):
            self.assertEqual(self.app.run(), 0)


class TestMain(MenuTestCase):
    def setUp(self):
        super().setUp()
        for name in ("setup_logging", "register_signal_handlers"):
            patcher = patch.object(sdr_hub_setup, name)
            patcher.start()
            self.addCleanup(patcher.stop)
        self.argv = [
            "--systemd-dir",
            self.path("systemd"),
            "--blacklist-file",
            self.path("blacklist-rtl.conf"),
            "--build-dir",
            self.path("build"),
            "--log-file",
            self.path("setup.log"),
        ]

    def test_non_root_exits_before_menu(self):
        ask = self.answer()
        with patch.object(sdr_hub_setup.os, "geteuid", return_value=1000):
            with patch.object(sdr_hub_setup.SdrHubSetup, "show_menu") as show_menu:
                self.assertEqual(main(self.argv), 1)
        show_menu.assert_not_called()
        ask.assert_not_called()
        sdr_hub_setup.setup_logging.assert_not_called()
        self.assertEqual(self.fake.calls, [])

    def test_exit_from_menu(self):
        self.answer("6")
        with patch.object(sdr_hub_setup.os, "geteuid", return_value=0):
            self.assertEqual(main(self.argv), 0)
        sdr_hub_setup.setup_logging.assert_called_once_with(self.path("setup.log"))

    def test_configure_stream_then_exit(self):
        self.answer("2", "4321", "", "", "6")
        with patch.object(sdr_hub_setup.os, "geteuid", return_value=0):
            self.assertEqual(main(self.argv), 0)
        with open(self.path("systemd", "rtl_tcp.service")) as f:
            self.assertIn("-p 4321 -d 0\n", f.read())

    def test_command_failure_exits_with_error(self):
        self.fake.failures["apt"] = 100
        self.answer("5")
        with patch.object(sdr_hub_setup.os, "geteuid", return_value=0):
            self.assertEqual(main(self.argv), 1)
        self.assertEqual(self.fake.commands, [["apt", "update"]])

    def test_install_error_exits_with_error(self):
        self.fake.produce_package = False
        self.answer("3")
        with patch.object(sdr_hub_setup.os, "geteuid", return_value=0):
            self.assertEqual(main(self.argv), 1)

    def test_ctrl_c_exits_130(self):
        with patch.object(sdr_hub_setup.Prompt, "ask", side_effect=KeyboardInterrupt):
            with patch.object(sdr_hub_setup.os, "geteuid", return_value=0):
                self.assertEqual(main(self.argv), 130)

    def test_dry_run_flag(self):
        self.answer("1", "", "6")
        with patch.object(sdr_hub_setup.os, "geteuid", return_value=0):
            self.assertEqual(main(["--dry-run", *self.argv]), 0)
        self.assertEqual(self.fake.calls, [])
        self.assertFalse(os.path.exists(self.path("blacklist-rtl.conf")))


class TestSignals(unittest.TestCase):
    def test_ctrl_c_is_left_to_keyboard_interrupt(self):
        with patch.object(sdr_hub_setup.signal, "signal") as register:
            sdr_hub_setup.register_signal_handlers()
        registered = {c.args[0] for c in register.call_args_list}
        self.assertEqual(registered, {signal.SIGTERM, signal.SIGHUP})
        self.assertNotIn(signal.SIGINT, registered)

    def test_handler_exits_with_signal_code(self):
        with self.assertRaises(SystemExit) as ctx:
            sdr_hub_setup.signal_handler(signal.SIGTERM, None)
        self.assertEqual(ctx.exception.code, 128 + signal.SIGTERM)


if __name__ == "__main__":
    unittest.main()
