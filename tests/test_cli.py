# Tests del CLI con pipeline mockeado
# Ejecutar con: pytest tests/test_cli.py -v

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from adapters.inbound.cli import build_parser, main
from core.domain.errors import EmptySchemaError


@pytest.fixture
def cli_pipeline(mock_deps):
    pipeline = mock_deps.pipeline
    pipeline.close = AsyncMock()
    with patch("adapters.inbound.cli.create_pipeline", return_value=pipeline), \
         patch("adapters.inbound.cli.setup_logging"):
        yield pipeline


@pytest.mark.unit
class TestCLI:
    """Modos --query, --schema e --info"""

    def test_parser_flags(self):
        args = build_parser().parse_args(["-q", "hola", "-p", "claude", "--explain"])
        assert args.query == "hola"
        assert args.provider == "claude"
        assert args.explain is True
        assert args.schema is False

    def test_parser_rejects_unknown_provider(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-p", "openai"])

    def test_query_mode(self, cli_pipeline, capsys):
        code = main(["--query", "¿Cuántos usuarios hay?", "--provider", "gemini"])

        assert code == 0
        cli_pipeline.run.assert_awaited_once_with(
            "¿Cuántos usuarios hay?", provider="gemini", explain=False
        )
        cli_pipeline.close.assert_awaited_once()
        out = capsys.readouterr().out
        assert "SELECT COUNT(*) AS total FROM users" in out
        assert '{"total": 3}' in out

    def test_schema_mode(self, cli_pipeline, capsys):
        code = main(["--schema", "--refresh"])

        assert code == 0
        cli_pipeline.get_schema.assert_awaited_once_with(refresh=True)
        out = capsys.readouterr().out
        assert "DATABASE SCHEMA:" in out
        assert "TABLE: users" in out

    def test_info_mode(self, cli_pipeline, capsys):
        assert main(["--info"]) == 0
        out = capsys.readouterr().out
        assert "shop" in out
        assert "gemini" in out

    def test_domain_error_exit_code(self, cli_pipeline):
        cli_pipeline.run.side_effect = EmptySchemaError()
        assert main(["-q", "hola"]) == 1
        cli_pipeline.close.assert_awaited_once()
