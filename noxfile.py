import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the project with its test extra into the nox virtualenv."""
    session.install("-e", ".[test]")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no outbound adapters involved)."""
    _install(session)
    session.run("pytest", "tests/ordering/domain/", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_application(session: nox.Session) -> None:
    """Run command handler and BDD tests against the in-memory providers."""
    _install(session)
    session.run("pytest", "tests/ordering/application/", "tests/ordering/bdd/", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_integration(session: nox.Session) -> None:
    """Run HTTP API tests through the FastAPI test client."""
    _install(session)
    session.run("pytest", "tests/ordering/integration/", *session.posargs)
