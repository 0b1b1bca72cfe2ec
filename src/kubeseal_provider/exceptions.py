"""Custom exceptions for kubeseal-provider.

This module defines the exception hierarchy used throughout the package.
Every error aborts the current pipeline run, so the messages carry the
value that failed (endpoint, cluster, context or tool path) and any
captured error stream verbatim.
"""


class KubesealProviderError(Exception):
    """Base exception for all kubeseal-provider errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all kubeseal-provider errors with a single
    except clause if desired.
    """

    pass


class ResolutionError(KubesealProviderError):
    """Raised when a kubeconfig lookup does not find what it searched for."""

    pass


class NoClusterError(ResolutionError):
    """Raised when no cluster in the kubeconfig uses the requested apiServer."""

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        super().__init__(
            f"no cluster that matches the apiServer `{endpoint}` was found. Please check your $KUBECONFIG"
        )


class NoContextError(ResolutionError):
    """Raised when no context with the requested name (or cluster) exists.

    The endpoint lookup raises it with the matched cluster name when no
    context references that cluster; the reverse lookup raises it with the
    requested context name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"no context named `{name}` was found. Please check your $KUBECONFIG")


class MissingClusterError(ResolutionError):
    """Raised when a selected context references a cluster that does not exist."""

    def __init__(self, cluster_name: str, context_name: str) -> None:
        self.cluster_name = cluster_name
        self.context_name = context_name
        super().__init__(
            f"no cluster named `{cluster_name}` as required by context `{context_name}` was found. "
            "Please check your $KUBECONFIG"
        )


class MalformedConfigError(KubesealProviderError):
    """Raised when the kubeconfig document does not have the expected shape.

    Attributes:
        field_path: Location of the offending value, e.g. ``clusters[1].cluster.server``.
        actual_shape: The JSON type found there (``null``, ``number``, ``missing``...).
        expected: The JSON type that was required.

    """

    def __init__(self, field_path: str, actual_shape: str, expected: str = "") -> None:
        self.field_path = field_path
        self.actual_shape = actual_shape
        self.expected = expected
        wanted = f"expected {expected} at" if expected else "unexpected value at"
        super().__init__(f"malformed kubeconfig: {wanted} `{field_path}`, got {actual_shape}")


class ToolError(KubesealProviderError):
    """Base class for failures of an external tool (kubectl, kubeseal)."""

    def __init__(self, tool: str, message: str) -> None:
        self.tool = tool
        super().__init__(message)


class ProcessLaunchError(ToolError):
    """Raised when an external tool cannot be started at all."""

    def __init__(self, tool: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(tool, f"unable to start process `{tool}`: {cause}")


class ProcessExecutionError(ToolError):
    """Raised when an external tool exits with a non-zero code.

    The captured error stream is kept verbatim in ``stderr`` and in the message.
    """

    def __init__(self, tool: str, exit_code: int, stderr: str) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(tool, f"`{tool}` failed (exit code {exit_code}): {stderr}")


class ProcessCancelledError(ToolError):
    """Raised when an external tool is killed due to cancellation or a deadline."""

    def __init__(self, tool: str, reason: str) -> None:
        self.reason = reason
        super().__init__(tool, f"`{tool}` was aborted: {reason}")


class SerializationError(KubesealProviderError):
    """Raised when a built secret cannot be encoded to its canonical form."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"failed to marshal secret to json: {cause}")


class SecretSpecError(KubesealProviderError, ValueError):
    """Raised when a secret declaration is missing a required field or holds an invalid value."""

    pass


class SecretParsingError(KubesealProviderError):
    """Raised when parsing a secret declaration file fails.

    This can occur when:
    - The file does not exist
    - The file is not valid YAML
    - The YAML does not describe a secret declaration
    """

    pass


class BinaryNotFoundError(KubesealProviderError):
    """Raised when a required binary (kubeseal, kubectl) is not found.

    This can occur when:
    - The binary is not installed
    - The binary is not in the system PATH
    - The configured path does not exist
    """

    pass
