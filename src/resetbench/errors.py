class ConfigurationError(Exception):
    """Run cannot start: no nodes, bad counts, unusable template."""


class TemplateError(ConfigurationError):
    """Job template is missing or does not render to a Job manifest."""


class SubmissionError(Exception):
    """Creating a Job through the cluster API failed."""


class PollTimeoutError(Exception):
    """A batch did not reach a terminal state within max_wait."""
