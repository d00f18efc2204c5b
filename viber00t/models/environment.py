"""Language environment definitions."""

from enum import Enum
from typing import NamedTuple, Tuple


class EnvironmentName(str, Enum):
    """Toolchain environments a project can request."""

    PYTHON = "python"
    RUST = "rust"
    NODE = "node"
    GO = "go"
    RUBY = "ruby"
    JAVA = "java"
    CPP = "cpp"
    PHP = "php"
    DOTNET = "dotnet"

    @property
    def profile(self) -> "EnvironmentProfile":
        return ENVIRONMENT_PROFILES[self]


class EnvironmentProfile(NamedTuple):
    """Packages and extra Dockerfile steps for one environment."""

    packages: Tuple[str, ...]
    setup: str = ""


RUST_SETUP = """RUN curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh -s -- -y --default-toolchain stable && \\
    . /root/.cargo/env && \\
    rustup component add rustfmt clippy rust-analyzer rust-src && \\
    cargo install cargo-watch cargo-edit cargo-expand

ENV PATH="/root/.cargo/bin:${PATH}"
ENV RUST_BACKTRACE=1"""

NODE_SETUP = "RUN npm install -g n"

ENVIRONMENT_PROFILES = {
    EnvironmentName.PYTHON: EnvironmentProfile(
        ("python3", "python3-dev", "python3-pip", "python3-venv", "pipx",
         "poetry", "pyenv", "python3-setuptools"),
    ),
    EnvironmentName.RUST: EnvironmentProfile(
        ("pkg-config", "libssl-dev", "build-essential"),
        RUST_SETUP,
    ),
    EnvironmentName.NODE: EnvironmentProfile(("nodejs", "npm", "yarn"), NODE_SETUP),
    EnvironmentName.GO: EnvironmentProfile(("golang", "gopls")),
    EnvironmentName.RUBY: EnvironmentProfile(("ruby-full", "ruby-dev", "bundler", "rbenv")),
    EnvironmentName.JAVA: EnvironmentProfile(("openjdk-17-jdk", "maven", "gradle")),
    EnvironmentName.CPP: EnvironmentProfile(
        ("clang", "clang-tools", "clang-format", "cmake", "ninja-build",
         "ccache", "gdb", "valgrind"),
    ),
    EnvironmentName.PHP: EnvironmentProfile(("php", "php-cli", "php-mbstring", "php-xml", "composer")),
    EnvironmentName.DOTNET: EnvironmentProfile(("dotnet-sdk-8.0", "nuget")),
}

# Base tier used when a project declares no environment
NEUTRAL_TIER = "base"
