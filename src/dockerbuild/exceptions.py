class DockerbuildError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading and parsing the configuration file ---
class ConfigurationError(DockerbuildError):
    """Base class for errors encountered while finding, reading, or parsing config files."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the main configuration file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML configuration file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the configuration fails structural validation (e.g., Pydantic)."""

    pass


class PomError(ConfigurationError):
    """Raised when a pom.xml cannot be read or lacks mandatory coordinates."""

    pass


# --- 2. Errors in the definition of build arguments, directives and placeholders ---
class DefinitionError(DockerbuildError):
    """Base class for errors in the logical definition of a build."""

    pass


class DockerfileSyntaxError(DefinitionError):
    """Raised for a malformed ARG instruction in a Dockerfile."""

    pass


class ArgumentValidationError(DefinitionError):
    """Base class for build argument binding failures."""

    pass


class UnknownArgumentError(ArgumentValidationError):
    """Raised when an argument is bound that the Dockerfile does not declare."""

    pass


class MissingArgumentError(ArgumentValidationError):
    """Raised when a mandatory argument ends up without a value."""

    def __init__(self, names):
        self.names = list(names)
        super().__init__(f"mandatory argument is missing: {', '.join(self.names)}")


class EvaluationError(DefinitionError):
    """Raised for malformed or unknown directives in an argument value."""

    pass


class MetadataNotFoundError(DefinitionError):
    """Raised when a directive or argument references absent project metadata."""

    pass


class PlaceholderError(DefinitionError):
    """Raised for malformed or unresolvable image reference placeholders."""

    pass


# --- 3. Errors that occur while building or pushing the image ---
class BuildError(DockerbuildError):
    """Base class for errors reported by the build engine."""

    pass


class BuildFailure(BuildError):
    """Raised when the engine reports an error or ends the stream without an image id."""

    def __init__(self, error, output: str = ""):
        self.error = error
        self.output = output
        super().__init__(f"Docker build failed: {error}")


class BuildInterrupted(BuildError):
    """Raised when waiting for the build engine is interrupted."""

    pass


class PushError(BuildError):
    """Raised when pushing an image to its registry fails."""

    pass


# --- 4. Errors related to IO operations ---
class DockerbuildIOError(DockerbuildError):
    """Base class for IO-related errors."""

    pass


class ArtifactNotFoundError(DockerbuildIOError):
    """Raised when a build output file or copy source does not exist."""

    pass


class TemplateNotFoundError(DockerbuildIOError):
    """Raised when a dockerbuild template cannot be located or has no Dockerfile."""

    pass


class ContextEscapeError(DockerbuildIOError):
    """Raised when a file would be written outside the build context directory."""

    pass


# --- 5. Errors of external collaborators ---
class VcsError(DockerbuildError):
    """Raised when git metadata cannot be determined."""

    pass


class CredentialError(DockerbuildError):
    """Raised when registry credentials cannot be resolved."""

    pass
