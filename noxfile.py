"""Nox sessions for multi-environment testing and quality assurance."""

import nox


@nox.session(python=["3.13", "3.14"])
def tests(session: nox.Session) -> None:
    """Run test suite with coverage reporting.

    Args:
        session: The nox session object.
    """
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run(
        "pytest",
        "--cov=filestuff",
        "--cov-report=term-missing:skip-covered",
        "--cov-fail-under=85",
    )


@nox.session(python=["3.13"])
def properties(session: nox.Session) -> None:
    """Run only the hypothesis property tests, with more examples.

    Args:
        session: The nox session object.
    """
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run("pytest", "-m", "property", "--hypothesis-show-statistics")


@nox.session(python=["3.13"])
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks.

    Args:
        session: The nox session object.
    """
    session.run("uv", "sync", "--extra", "dev", external=True)
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(python=["3.13"])
def typecheck(session: nox.Session) -> None:
    """Run basedpyright type checking.

    Args:
        session: The nox session object.
    """
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run("uvx", "basedpyright@latest", external=True)


@nox.session(python=["3.13"])
def check_isolation(session: nox.Session) -> None:
    """Check that only the filesystem collaborators touch the disk.

    Enforces the architectural rule that the builder, classifier, registry,
    containers, types and utils go through the FileSystem protocol.

    Args:
        session: The nox session object.
    """
    session.run("python3", "scripts/check_filesystem_isolation.py", external=True)
