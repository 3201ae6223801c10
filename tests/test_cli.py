"""
Tests for the command line parser and the models command.
"""

from unittest.mock import patch

import pytest

from vortextau import cli
from vortextau.errors import GenerationError


class TestParser:
    def test_subcommands(self):
        parser = cli.build_parser()
        assert parser.parse_args(["serve", "--port", "8080"]).port == 8080
        args = parser.parse_args(["chat", "--model", "m", "--retrieval", "keyword"])
        assert (args.model, args.retrieval) == ("m", "keyword")
        assert parser.parse_args(["models"]).func is cli.cmd_models

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_unknown_strategy_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["chat", "--retrieval", "always"])


class TestModelsCommand:
    def test_prints_models(self, capsys):
        models = [{"name": "0xroyce/plutus:latest", "details": {"parameter_size": "8B", "quantization_level": "Q4_0"}}]

        async def fake_list(self):
            return models

        with patch("vortextau.client.api.ChatAPI.list_models", fake_list):
            assert cli.main(["models", "--api-url", "http://vortex.test"]) == 0

        assert "0xroyce/plutus:latest  (8B, Q4_0)" in capsys.readouterr().out

    def test_backend_error(self, capsys):
        async def failing(self):
            raise GenerationError("Failed to fetch models")

        with patch("vortextau.client.api.ChatAPI.list_models", failing):
            assert cli.main(["models"]) == 1
        assert "Failed to fetch models" in capsys.readouterr().err
