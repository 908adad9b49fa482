from budget_core.io.config import ConfigError, load_budget_config, load_burden_policy  # noqa: F401

__all__ = ["ConfigError", "load_budget_config", "load_burden_policy"]
