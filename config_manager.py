"""Configuration management for the chess challenge benchmark suite.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize benchmark settings, the problem instances to run, and the
solution counts recorded by earlier runs.

File format (high-level)
------------------------
- experiment_settings: number of runs per problem/mode and output directory.
- search_settings: search modes to compare, workers per search, count-only flag.
- problems: list of {name, pieces, width, height} problem instances.
- reference_counts: mapping problem name -> solution count recorded by a
  previous run, used to validate later runs.

All methods return Python native types; the class does not validate semantics
beyond presence of keys to keep responsibilities minimal.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load, query, and persist configuration and reference counts.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        Path to the configuration file.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        """Load and parse the JSON configuration file.

        Returns
        -------
        dict
            Root configuration object.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Create it or use the default config.json template"
            )

        with open(self.config_path, 'r') as f:
            return json.load(f)

    def save_config(self):
        """Persist the current in-memory configuration to disk."""
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get_experiment_settings(self):
        """Return high-level experiment settings (runs, output dir)."""
        return self.config.get("experiment_settings", {})

    def get_search_settings(self):
        """Return search settings (modes, workers, count_only)."""
        return self.config.get("search_settings", {})

    def get_problems(self):
        """Return the list of problem definitions to benchmark."""
        return self.config.get("problems", [])

    def get_reference_counts(self, problem=None):
        """Return recorded solution counts.

        Parameters
        ----------
        problem : str | None
            If provided, return the count for that problem (or None);
            otherwise return the entire mapping.
        """
        counts = self.config.get("reference_counts", {})
        if problem:
            return counts.get(problem)
        return counts

    def save_reference_counts(self, counts):
        """Merge ``{problem: count}`` into the recorded counts and persist them.

        Problems whose count is None (runs disagreed) are not recorded.
        """
        if "reference_counts" not in self.config:
            self.config["reference_counts"] = {}

        recorded = {name: int(count) for name, count in counts.items() if count is not None}
        self.config["reference_counts"].update(recorded)
        self.save_config()
        print(f"Reference counts for {len(recorded)} problem(s) saved to {self.config_path}")

    def has_reference_count(self, problem):
        """Return True if a solution count is recorded for ``problem``."""
        return problem in self.config.get("reference_counts", {})

    def update_setting(self, section, key, value):
        """Update a specific setting and persist the change immediately."""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value
        self.save_config()
