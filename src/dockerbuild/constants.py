# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "scan": "dockerbuild.arguments.scanner",
    "eval": "dockerbuild.arguments.evaluator",
    "dir": "dockerbuild.arguments.directives",
    "bind": "dockerbuild.arguments.binding",
    "args": "dockerbuild.arguments",
    "ph": "dockerbuild.placeholders",
    "build": "dockerbuild.builder.build",
    "bld": "dockerbuild.builder.build",
    "push": "dockerbuild.builder.push",
    "ctx": "dockerbuild.builder.context",
    "engine": "dockerbuild.builder.engine",
    "eng": "dockerbuild.builder.engine",
    "lsn": "dockerbuild.builder.listener",
    "io": "dockerbuild.io",
    "conf": "dockerbuild.config",
    "pom": "dockerbuild.pom",
    "git": "dockerbuild.vcs",
    "vcs": "dockerbuild.vcs",
    "auth": "dockerbuild.auth",
    "rty": "dockerbuild.registry",
}

# Top-level modules within dockerbuild for auto-prefixing
KNOWN_TOP_MODULES = {
    "arguments",
    "builder",
    "io",
    "datacls",
    "utils",
    "exceptions",
    "config",
    "registry",
    "placeholders",
    "pom",
    "vcs",
    "auth",
    "cli",
}

LOG_LEVELS_ENV = "DOCKERBUILD_LOG_LEVELS"

# --- Filenames and Paths ---
DOCKERFILE_NAME = "Dockerfile"
DEFAULT_CONFIG_FILENAME = "dockerbuild.yml"
DOCKERBUILD_SUBDIR = "dockerbuild"
CONTEXT_SUBDIR = "context"
BUILD_LOG_FILENAME = "build.log"
IMAGE_FILENAME = "image"
TEMPLATE_EXCLUDES = ("META-INF",)
ARCHIVE_SUFFIXES = (".zip", ".jar", ".war")
ARCHIVE_SEPARATOR = "!"

# --- Directive Values ---
DIRECTIVE_SIGIL = "%"
DIRECTIVE_SEPARATOR = ":"

# --- Argument Name Prefixes ---
ARTIFACT_PREFIX = "artifact"
BUILD_PREFIX = "build"
POM_PREFIX = "pom"

# --- Image Reference Placeholders ---
PLACEHOLDER_SIGIL = "%"
PLACEHOLDER_OPTIONAL = "-"
DEFAULT_IMAGE_TEMPLATE = "%g/%a:%V"
SNAPSHOT_SUFFIX = "-SNAPSHOT"
SANITIZE_EXTRA = frozenset("_-.")

# --- Labels ---
LABEL_PREFIX = "dockerbuild."
LABEL_COMMENT = f"{LABEL_PREFIX}comment"
LABEL_ORIGIN_SCM = f"{LABEL_PREFIX}origin-scm"
LABEL_ORIGIN_USER = f"{LABEL_PREFIX}origin-user"
LABEL_ARG_PREFIX = f"{LABEL_PREFIX}arg."

# --- VCS ---
UNKNOWN_ORIGIN = "unknown"
GIT_ORIGIN_PREFIX = "git:"

# --- Registry Credentials ---
DOCKER_CONFIG_ENV = "DOCKER_CONFIG"
DOCKER_CONFIG_FILENAME = "config.json"
DOCKER_HUB_REGISTRY = "https://index.docker.io/v1/"
DOCKER_HUB_ALIASES = {"docker.io", "index.docker.io", "registry-1.docker.io"}
CREDENTIAL_HELPER_PREFIX = "docker-credential-"

# --- Engines ---
ENGINE_API = "api"
ENGINE_CLI = "cli"
