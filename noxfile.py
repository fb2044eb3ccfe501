import pathlib

import nox


PYTHON_FILES = [
    "gmi2gopher.py",
    "setup.py",
    "noxfile.py",
    "tests",
]


@nox.session(reuse_venv=True)
def lint(session):
    session.install("-e", ".[dev]")
    session.run("flake8", *PYTHON_FILES)
    session.run("black", "--check", "--diff", "--color", *PYTHON_FILES)


@nox.session(reuse_venv=True)
def black_fix(session):
    session.install("black")
    session.run("black", *PYTHON_FILES)


@nox.session(python=["3.9", "3.10", "3.11", "3.12", "3.13"], reuse_venv=True)
def test(session):
    session.install("pytest")
    session.install("-e", ".")
    session.run("pytest", "-vv", "--doctest-modules", "gmi2gopher.py", "tests/")


@nox.session(reuse_venv=True)
def convert_fixtures(session):
    """Run the ``gmi2gopher`` command on the test fixtures and diff the output."""
    session.install("-e", ".")
    output_dir = pathlib.Path(session.create_tmp())
    for fixture in sorted(pathlib.Path("tests/fixtures").glob("*.gmi")):
        for options, suffix in [([], ".gophermap"), (["--plain-text"], ".txt")]:
            output = output_dir / fixture.with_suffix(suffix).name
            session.run("gmi2gopher", *options, str(fixture), str(output))
            expected = fixture.with_suffix(suffix).read_text(encoding="UTF-8")
            if output.read_text(encoding="UTF-8") != expected:
                session.error("%s differs from %s" % (output, fixture.name))
