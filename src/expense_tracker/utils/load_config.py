import os

import yaml

DEFAULT_CONFIG_PATH = os.getenv("EXPENSE_TRACKER_CONFIG", "config.yaml")


def load_config_file(file_path=None):
    """
    Loads the configuration from the specified YAML file.

    Args:
        file_path (str): Path to the YAML configuration file. Defaults to
            $EXPENSE_TRACKER_CONFIG or ``config.yaml`` in the working directory.

    Returns:
        dict: Parsed configuration as a dictionary. Empty when the file is
        missing or blank, so callers fall back to their own defaults.
    """
    file_path = file_path or DEFAULT_CONFIG_PATH
    if not os.path.exists(file_path):
        return {}

    with open(file_path, "r") as file:
        return yaml.safe_load(file) or {}
