# teamctl/core/errors.py


class TeamctlError(Exception):
    """Base class for all errors raised by teamctl."""


class SettingsError(TeamctlError):
    pass


class KubeClientError(TeamctlError):
    pass


class MissingOptionError(TeamctlError):
    """A required option was not supplied in batch mode."""

    def __init__(self, option: str):
        self.option = option
        super().__init__(f"Missing option: --{option}")


class NoSelectionError(TeamctlError):
    pass


class LocationNotFoundError(TeamctlError):

    def __init__(self, git_url: str, owner: str):
        self.git_url = git_url
        self.owner = owner
        super().__init__(f"No quickstart location found for git URL: {git_url} and owner: {owner}")


class EnvironmentNotFoundError(TeamctlError):

    def __init__(self, name: str, namespace: str):
        self.name = name
        self.namespace = namespace
        super().__init__(f"No Environment '{name}' found in namespace '{namespace}'")


class UpdateConflictError(TeamctlError):
    pass
