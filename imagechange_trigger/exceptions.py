"""Image change trigger reconciliation errors"""


class BaseException(Exception):  # pylint: disable=redefined-builtin
    """The base class for all image change trigger exceptions."""


class ListConfigsError(BaseException):
    """Denote failure to list deployment configs, nothing was updated"""


class DeepCopyError(BaseException):
    """Denote failure to copy a deployment config prior to mutating it"""


class UpdateConfigError(BaseException):
    """Denote a rejected or failed deployment config update"""


class UpdatesFailedError(BaseException):
    """
    Some deployment configs could not be copied or updated for an image stream.
    Every other config in the batch was still attempted.

    :param stream: label of the image stream being handled
    :param attempted: number of configs submitted for update
    :param failures: config label to the error it failed with
    """

    def __init__(
        self, stream: str, attempted: int, failures: dict[str, Exception]
    ) -> None:
        self.stream = stream
        self.attempted = attempted
        self.failures = failures
        sep = "\n"
        details = [f"{label}: {error}" for label, error in failures.items()]
        super().__init__(
            "Couldn't update some deployment configs for trigger on image stream "
            f"{stream}:\n{sep.join(details)}"
        )
