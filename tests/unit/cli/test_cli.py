"""CLI dispatch and exit-code behavior tests.

Verifies how ``blinksearch.cli.main`` routes each flag and how fatal
errors become process exit codes.
"""

from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from blinksearch import cli
from blinksearch.errors import FilterAbortedError, LocationNotFoundError, MissingCacheFileError
from blinksearch.normalize import Separator

CONFIG_TEXT = (
    "locations:\n"
    "  home:\n"
    "    path: /home/u\n"
    "  nas:\n"
    "    path: /srv/nas\n"
    "    mode: folders\n"
    "    cache_file: all.txt\n"
)


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = Path(self._tmp.name)
        (self.config_dir / "blink.yml").write_text(CONFIG_TEXT, encoding="utf-8")
        patches = [
            mock.patch("blinksearch.config.CONFIG_DIR", self.config_dir),
            mock.patch("blinksearch.cli.setup_logging"),
        ]
        for patch in patches:
            patch.start()
            self.addCleanup(patch.stop)
        self.addCleanup(self._tmp.cleanup)

    def run_cli(self, *argv: str) -> tuple[str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            cli.main(list(argv))
        return out.getvalue(), err.getvalue()


class CliDispatchTests(CliTestCase):
    def test_list_locations_prints_menu_lines(self) -> None:
        out, _ = self.run_cli("--list-locations")

        self.assertEqual(out, "home (/home/u)\nnas (/srv/nas)\n")

    def test_get_config_path(self) -> None:
        out, _ = self.run_cli("-g")

        self.assertEqual(out.strip(), str(self.config_dir / "blink.yml"))

    def test_default_runs_session_for_first_location(self) -> None:
        with mock.patch("blinksearch.cli.run_session") as run_session:
            self.run_cli()

        self.assertEqual(run_session.call_args.args[1], "home")

    def test_unique_prefix_selects_location(self) -> None:
        with mock.patch("blinksearch.cli.run_session") as run_session:
            self.run_cli("NA")

        self.assertEqual(run_session.call_args.args[1], "nas")

    def test_open_path_bypasses_fzf(self) -> None:
        with (
            mock.patch("blinksearch.cli.run_session") as run_session,
            mock.patch("blinksearch.session.open_path") as open_path,
        ):
            self.run_cli("--open-path=sub/file.txt", "home")

        run_session.assert_not_called()
        open_path.assert_called_once_with(str(Path("/home/u") / "sub/file.txt"))

    def test_create_cache_copies_fd_listing_even_for_cached_location(self) -> None:
        candidates = mock.Mock(stdout=io.BytesIO(b"a\nb\n"))
        stdout = mock.Mock()
        with (
            mock.patch("blinksearch.cli.spawn_candidates", return_value=candidates) as spawn_candidates,
            mock.patch("blinksearch.cli.sys.stdout", stdout),
        ):
            cli.main(["--create-cache", "nas"])

        source = spawn_candidates.call_args.args[0]
        self.assertEqual(source.location.path, "/srv/nas")
        self.assertEqual(source.command()[:5], ["fd", ".", "--print0", "--type", "d"])
        stdout.buffer.write.assert_called_with(b"a\nb\n")
        candidates.close.assert_called_once_with()

    def test_no_locations_prints_example_config(self) -> None:
        (self.config_dir / "blink.yml").write_text("locations: {}\n", encoding="utf-8")
        with mock.patch("blinksearch.cli.run_session") as run_session:
            out, _ = self.run_cli()

        run_session.assert_not_called()
        self.assertIn("No locations defined", out)
        self.assertIn("cache_file:", out)


class CliErrorTests(CliTestCase):
    def test_unknown_location_exits_with_error_code(self) -> None:
        with self.assertRaises(SystemExit) as exc_info:
            self.run_cli("zzz")

        self.assertEqual(exc_info.exception.code, LocationNotFoundError.exit_code)
        self.assertNotEqual(exc_info.exception.code, 0)

    def test_missing_cache_file_exits_non_zero_and_reports(self) -> None:
        err = io.StringIO()
        with (
            mock.patch("blinksearch.cli.run_session", side_effect=MissingCacheFileError("/srv/nas/all.txt")),
            redirect_stderr(err),
        ):
            with self.assertRaises(SystemExit) as exc_info:
                cli.main(["nas"])

        self.assertEqual(exc_info.exception.code, 1)
        self.assertIn("Cache file /srv/nas/all.txt not found", err.getvalue())

    def test_missing_cache_file_end_to_end_never_starts_fzf(self) -> None:
        nas_root = self.config_dir / "nas"
        nas_root.mkdir()
        (self.config_dir / "blink.yml").write_text(
            f"locations:\n  nas:\n    path: {nas_root.as_posix()}\n    cache_file: missing.txt\n",
            encoding="utf-8",
        )
        err = io.StringIO()
        with (
            mock.patch("blinksearch.sources.spawn") as source_spawn,
            mock.patch("blinksearch.fzf.spawn") as fzf_spawn,
            redirect_stderr(err),
        ):
            with self.assertRaises(SystemExit) as exc_info:
                cli.main(["nas"])

        self.assertNotEqual(exc_info.exception.code, 0)
        self.assertEqual(exc_info.exception.code, MissingCacheFileError.exit_code)
        source_spawn.assert_not_called()
        fzf_spawn.assert_not_called()
        self.assertIn("missing.txt not found", err.getvalue())

    def test_user_abort_exits_130_quietly(self) -> None:
        err = io.StringIO()
        with (
            mock.patch("blinksearch.cli.run_session", side_effect=FilterAbortedError()),
            redirect_stderr(err),
        ):
            with self.assertRaises(SystemExit) as exc_info:
                cli.main([])

        self.assertEqual(exc_info.exception.code, 130)
        self.assertEqual(err.getvalue(), "")


class NormalizeModeTests(unittest.TestCase):
    def test_normalize_mode_skips_config_and_filters_stdin(self) -> None:
        with (
            mock.patch("blinksearch.cli.normalize_stream") as normalize_stream,
            mock.patch("blinksearch.cli.run") as run,
            mock.patch("blinksearch.cli.sys.stdin") as stdin,
        ):
            cli.main(["--normalize-paths=null"])

        run.assert_not_called()
        self.assertIs(normalize_stream.call_args.args[0], stdin.buffer)
        self.assertEqual(normalize_stream.call_args.args[2], Separator.NULL)

    def test_normalize_mode_rejects_unknown_separator(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as exc_info:
                cli.main(["--normalize-paths=tab"])

        self.assertEqual(exc_info.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
