"""Project version constants.

These constants are used in logs and in the SDK user agent so that a login
attempt seen in CloudTrail can be traced back to a specific tool version.
"""

ENGINE_NAME: str = "ecrpreflight"
ENGINE_VERSION: str = "0.1.0"
