# Error taxonomy
# Exceptions raised by configuration, discovery and tool dispatch


class BridgeError(Exception):
    """Base class for all errors raised by the bridge."""


class ConfigLoadFailed(BridgeError):
    """Site configuration could not be read or parsed. Fatal at startup."""


class ConfigInvalid(BridgeError):
    """A single site entry is missing required fields. The site is skipped."""

    def __init__(self, alias: str, reason: str) -> None:
        super().__init__(f"Invalid configuration for site {alias}: {reason}")
        self.alias = alias
        self.reason = reason


class DiscoveryFailed(BridgeError):
    """Endpoint discovery for one site failed."""

    def __init__(self, site: str, reason: str) -> None:
        super().__init__(f"Failed to discover endpoints for {site}: {reason}")
        self.site = site
        self.reason = reason


class UnknownSite(BridgeError):
    def __init__(self, site: str) -> None:
        super().__init__(f"Unknown site: {site}")
        self.site = site


class UnknownTool(BridgeError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UpstreamRequestFailed(BridgeError):
    """The remote API returned an error status or could not be reached."""

    def __init__(self, status: int | None, message: str) -> None:
        if status is None:
            super().__init__(f"Request failed: {message}")
        else:
            super().__init__(f"Request failed with status {status}: {message}")
        self.status = status
        self.message = message


class InvalidFilterPattern(BridgeError):
    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid regex pattern: {pattern} ({reason})")
        self.pattern = pattern
        self.reason = reason
