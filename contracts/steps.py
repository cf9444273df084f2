"""Stable identifiers of the preflight steps.

Checks, the remediation table and log artifacts all key off these ids.
"""

STEP_CONTAINER_RUNTIME = "tools.container_runtime"
STEP_CLOUD_CLI = "tools.cloud_cli"
STEP_CLOUD_CLI_VERSION = "tools.cloud_cli_version"
STEP_AUTH_CONFIGURED = "auth.configured"
STEP_CREDENTIALS = "credentials.freshness"
STEP_CREDENTIAL_OWNERSHIP = "credentials.ownership"
STEP_LOGIN = "registry.login"
STEP_PRIVILEGES = "host.privileges"
