"""Utility functions for ETS models."""

# Import directly from submodules:
#   from autoets.core.utils.ic import AIC, AICc, BIC
#   from autoets.core.utils.var_covar import var_anal
#   from autoets.core.utils.printing import format_model_summary
