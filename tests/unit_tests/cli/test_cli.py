import unittest
from unittest.mock import patch

from patchkit.cli.main import main


class TestCLI(unittest.TestCase):
    @patch("sys.argv", ["patchkit", "apply", "--binary", "cli.js", "-m", "context_limit"])
    @patch("patchkit.cli.subcommands.apply.run")
    def test_apply_command(self, mock_run):
        """Test the apply command dispatch."""
        mock_run.return_value = 0
        self.assertEqual(main(), 0)
        mock_run.assert_called_once()
        args = mock_run.call_args[0][0]
        self.assertEqual(args.binary, "cli.js")
        self.assertEqual(args.modules, "context_limit")
        self.assertFalse(args.dry_run)

    @patch("sys.argv", ["patchkit", "list"])
    @patch("patchkit.cli.subcommands.list_modules.run")
    def test_list_command(self, mock_run):
        """Test the list command dispatch."""
        mock_run.return_value = 0
        main()
        mock_run.assert_called_once()

    @patch("sys.argv", ["patchkit", "apply"])
    def test_apply_requires_binary(self):
        with self.assertRaises(SystemExit) as cm:
            main()
        self.assertEqual(cm.exception.code, 2)

    @patch("sys.argv", ["patchkit", "unknown"])
    def test_unknown_command(self):
        """Test handling of unknown commands."""
        with self.assertRaises(SystemExit) as cm:
            main()
        self.assertEqual(cm.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
