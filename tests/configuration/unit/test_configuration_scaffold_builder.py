"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from tfc_run_worker.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from tfc_run_worker.configuration.loader import ConfigurationError, parse_configuration


def test_build_placeholder_configuration_contains_all_supported_sections() -> None:
    scaffold = build_placeholder_configuration()

    for section in (
        "aws:",
        "queue:",
        "storage:",
        "variables:",
        "configuration_versions:",
        "workspace:",
        "engine:",
        "processing:",
        "logging:",
    ):
        assert section in scaffold
    assert "<REQUIRED>" in scaffold
    assert "# kafka:" in scaffold


def test_placeholder_configuration_is_rejected_until_queue_url_is_set() -> None:
    with pytest.raises(ConfigurationError, match="placeholder"):
        parse_configuration(yaml.safe_load(build_placeholder_configuration()))


def test_filled_placeholder_configuration_parses_with_documented_defaults() -> None:
    queue_url = "https://sqs.ca-central-1.amazonaws.com/123456789012/tfc-run-events"
    scaffold = build_placeholder_configuration().replace("<REQUIRED>", queue_url)

    configuration = parse_configuration(yaml.safe_load(scaffold))

    assert configuration.queue.url == queue_url
    assert configuration.queue.max_messages == 5
    assert configuration.engine.version == "1.9.6"
    assert configuration.processing.acknowledgement == "always"


def test_write_placeholder_configuration_writes_file(tmp_path: Path) -> None:
    output_path = tmp_path / "worker.yaml"

    written_path = write_placeholder_configuration(output_path)

    assert written_path == output_path.resolve()
    assert "<REQUIRED>" in output_path.read_text(encoding="utf-8")


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "worker.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(output_path)
