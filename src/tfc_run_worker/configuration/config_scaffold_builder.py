"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "worker.yaml"
REQUIRED_PLACEHOLDER = "<REQUIRED>"

_CONFIG_SCAFFOLD_TEMPLATE = """# Worker configuration template for tfc-run-worker.
# Replace every <REQUIRED> placeholder before running the worker.
# Every other value shows the default that applies when the key is omitted.

aws:
  region: "ca-central-1"
  # endpoint_url: "http://localhost:4566"

queue:
  # Choose the run-request queue backend (sqs or kafka).
  backend: "sqs"
  url: "<REQUIRED>"
  max_messages: 5
  wait_time_seconds: 10
  # kafka:
  #   bootstrap_servers:
  #     - "localhost:9092"
  #   topic: "tfc-run-events"
  #   group_id: "tfc-run-worker"
  #   security:
  #     security.protocol: "SASL_SSL"

storage:
  bucket: "tfc-configuration-files"

variables:
  table: "vars"
  partition_key: "workspace-id"

configuration_versions:
  table: "configuration-versions"

workspace:
  # Directory exclusively owned by the run in progress; removed after every run.
  root: "~/tf-config"
  download_dir: "~"

engine:
  version: "1.9.6"
  binary_path: "~/.bin/terraform"
  install_dir: "/opt/tfc-cache/terraform"
  use_install_cache: true
  variable_prefix: "TF_VAR_"
  command_timeout_seconds: 1800
  plan_enabled: false

processing:
  # always: delete every message after processing.
  # on_success: leave failed runs on the queue for redelivery (sqs backend only).
  acknowledgement: "always"
  record_run_status: false

logging:
  level: "INFO"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML worker configuration template with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder worker configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Worker configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
