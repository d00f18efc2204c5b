"""Constants used throughout viber00t."""

APP_NAME = "viber00t"
VERSION = "1.0.0"

# Image naming
IMAGE_NAMESPACE = "viber00t"
PROJECT_REPOSITORY_PREFIX = "viber00t/"
BASE_OS_IMAGE = "ubuntu:latest"

# Files
PROJECT_CONFIG_NAME = "Viber00t.toml"
GLOBAL_CONFIG_NAME = "config.toml"
STATE_SUFFIX = ".state"
LOCK_SUFFIX = ".lock"
DOCKERFILE_NAME = "Dockerfile"

# Cache and state subdirectories (under the XDG base directories)
BASE_IMAGES_DIR = "base-images"
PROJECT_BUILDS_DIR = "builds"
STATE_IMAGES_DIR = "images"

# Container layout
PROJECT_WORKDIR = "/c0de/project"
CONTAINER_HOSTNAME = "viber00t"
CONTAINER_PREFIX = "viber00t"
SHELL_CONTAINER_PREFIX = "viber00t-shell"
SHELL_COMMAND = ["/bin/bash"]
DOCKER_SOCKET = "/var/run/docker.sock"
PODMAN_USERNS = "--userns=keep-id:uid=0,gid=0"

# Host credential paths (relative to $HOME) mounted when present
CREDENTIAL_MOUNTS = [
    (".claude", "/root/.claude", "rw"),
    (".claude.json", "/root/.claude.json", "rw"),
    (".gitconfig", "/root/.gitconfig", "ro"),
    (".git-credentials", "/root/.git-credentials", "ro"),
    (".ssh", "/root/.ssh", "ro"),
]

# Packages every base image gets before the global base_packages
CORE_PACKAGES = [
    "curl", "wget", "sudo", "ca-certificates", "gnupg", "lsb-release",
    "git", "vim", "nano", "htop", "less", "man-db",
]

ENV_PROJECT = "VIBER00T_PROJECT"
ENV_INSTALL = "VIBER00T_INSTALL"
ENV_SANDBOX = "IS_SANDBOX"

DEFAULT_PROJECT_CONFIG = """[project]
name = "my-project"
agent = "claude"
privileged = false

[[install]]
packages = []
envs = []  # Available: python, rust, node, go, ruby, java, cpp, php, dotnet

[[volumes]]
# source = "~/extra"
# target = "/c0de/extra"

[[ports]]
# host = 3000
# container = 3000
"""

DEFAULT_GLOBAL_CONFIG = """# viber00t global configuration
# ~/.config/viber00t/config.toml

default_agent = "claude"
default_privileged = false
default_image = "viber00t/base:latest"

# Runtime CLI used to launch containers
container_cli = "podman"

# Flags passed to claude
claude_flags = ["--dangerously-skip-permissions"]

# Base packages installed in every container
base_packages = [
  "git", "git-lfs", "build-essential", "make",
  "vim", "nano", "htop", "tmux", "tree", "ncdu",
  "jq", "ripgrep", "fd-find", "fzf", "bat",
  "httpie", "netcat-openbsd", "iputils-ping",
  "zip", "unzip", "tar", "xz-utils",
  "docker.io", "docker-compose",
  "postgresql-client", "redis-tools", "sqlite3"
]

# Default environments for all projects
default_envs = []

# Default packages for all projects
default_packages = []

# Flags for agents other than claude
[agent_flags]
"""
