import io
import json
import logging
from unittest.mock import patch

import pytest

from typegen.api_codegen.context import GenerationConfig
from typegen.api_codegen.main import (
    TARGETS,
    build_parser,
    configure_logging,
    generate,
    main,
)
from typegen.shared.errors import UnresolvedReferenceError

SPEC_DATA = {
    "openapi": "3.0.0",
    "info": {"title": "Test API", "version": "1.0.0"},
    "paths": {
        "/beta/api/health": {
            "get": {
                "responses": {
                    "200": {"content": {"text/plain": {"schema": {"type": "string"}}}}
                }
            }
        }
    },
    "components": {"schemas": {"Status": {"type": "string", "enum": ["ok", "down"]}}},
}

BROKEN_SPEC = {
    "openapi": "3.0.0",
    "paths": {},
    "components": {
        "schemas": {
            "Thing": {
                "type": "object",
                "properties": {"other": {"$ref": "#/components/schemas/Missing"}},
            }
        }
    },
}


@pytest.fixture
def spec_file(tmp_path):
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(SPEC_DATA), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestBuildParser:
    def test_defaults(self):
        args = build_parser().parse_args(["-t", "ts"])
        assert args.source is None
        assert args.output is None
        assert args.api_prefix is None
        assert args.verbose is False

    def test_target_is_required(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["openapi.json"])
        assert exc_info.value.code == 2

    def test_unknown_target(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["openapi.json", "-t", "cobol"])
        assert exc_info.value.code == 2

    def test_targets(self):
        assert sorted(TARGETS) == ["ts"]


class TestConfigureLogging:
    def test_verbose(self):
        configure_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_env_level(self):
        with patch.dict("os.environ", {"TYPEGEN_LOG": "warning"}):
            configure_logging()
        assert logging.getLogger().level == logging.WARNING


class TestGenerate:
    def test_prefix_shapes_names(self):
        output = generate(SPEC_DATA, "ts", GenerationConfig.from_prefix("/beta/api/"))
        assert "  health: (options?: ApiOptions) => requestPlain(" in output
        assert 'export const STATUSES = ["down", "ok"] satisfies Status[];' in output

    def test_without_prefix(self):
        output = generate(SPEC_DATA, "ts")
        assert "  betaApiHealth: " in output

    def test_errors_propagate(self):
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            generate(BROKEN_SPEC, "ts")
        assert exc_info.value.location == "components.schemas.Thing"


class TestMain:
    def test_writes_output_file(self, spec_file, tmp_path, capsys):
        output = tmp_path / "out" / "client.ts"

        result = main([str(spec_file), "-t", "ts", "-o", str(output), "--api-prefix", "/beta/api"])

        assert result == 0
        text = output.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert "health: " in text
        assert f"Generated TypeScript client -> {output}" in capsys.readouterr().err

    def test_writes_stdout(self, spec_file, capsys):
        result = main([str(spec_file), "--target", "ts"])

        assert result == 0
        assert "export type Status = " in capsys.readouterr().out

    def test_reads_stdin(self, capsys):
        with patch("sys.stdin", io.StringIO(json.dumps(SPEC_DATA))):
            result = main(["-t", "ts"])

        assert result == 0
        assert "export const api = {" in capsys.readouterr().out

    def test_generation_error(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps(BROKEN_SPEC), encoding="utf-8")

        result = main([str(path), "-t", "ts"])

        assert result == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: [components.schemas.Thing] Unresolved reference 'Missing'" in captured.err

    def test_missing_document(self, tmp_path, capsys):
        result = main([str(tmp_path / "nope.json"), "-t", "ts"])

        assert result == 1
        assert "Failed to read document" in capsys.readouterr().err

    def test_usage_error(self, spec_file):
        with pytest.raises(SystemExit) as exc_info:
            main([str(spec_file)])
        assert exc_info.value.code == 2

    def test_nothing_written_on_failure(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps(BROKEN_SPEC), encoding="utf-8")
        output = tmp_path / "client.ts"

        assert main([str(path), "-t", "ts", "-o", str(output)]) == 1
        assert not output.exists()
