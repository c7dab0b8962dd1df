from unittest.mock import patch

from typegen import __main__


class TestCmdFunctions:
    @patch("typegen.api_codegen.main.main")
    def test_cmd_generate_success(self, mock_main):
        mock_main.return_value = 0
        result = __main__.cmd_generate(["openapi.json", "-t", "ts"])
        assert result == 0
        mock_main.assert_called_once_with(["openapi.json", "-t", "ts"])

    @patch("typegen.api_codegen.main.main")
    def test_cmd_generate_failure(self, mock_main):
        mock_main.return_value = 1
        assert __main__.cmd_generate([]) == 1

    @patch("typegen.api_codegen.main.main")
    def test_cmd_generate_usage_error(self, mock_main):
        mock_main.side_effect = SystemExit(2)
        assert __main__.cmd_generate([]) == 2

    @patch("typegen.api_codegen.main.main")
    def test_cmd_generate_help(self, mock_main):
        mock_main.side_effect = SystemExit(0)
        assert __main__.cmd_generate(["--help"]) == 0


class TestMain:
    def test_main_help(self):
        with patch("sys.argv", ["typegen"]), patch("builtins.print") as mock_print:
            result = __main__.main()
            assert result == 0
            mock_print.assert_called()

    def test_main_help_flag(self, capsys):
        with patch("sys.argv", ["typegen", "--help"]):
            assert __main__.main() == 0
        assert "generate" in capsys.readouterr().out

    def test_main_unknown_command(self):
        with (
            patch("sys.argv", ["typegen", "unknown"]),
            patch("sys.stderr"),
        ):
            result = __main__.main()
            assert result == 1

    @patch("typegen.api_codegen.main.main")
    def test_main_command_with_args(self, mock_main):
        mock_main.return_value = 0
        with patch("sys.argv", ["typegen", "generate", "spec.yaml", "--target", "ts"]):
            result = __main__.main()
            assert result == 0
            mock_main.assert_called_once_with(["spec.yaml", "--target", "ts"])
